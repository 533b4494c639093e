"""Command-line interface for receipt parsing and CSV export.

Provides subcommands for parsing a single receipt photo to JSON and for
processing folders of receipts into a CSV of line items.
"""

import argparse
import asyncio
import csv
import json
import sys
from pathlib import Path

from receipt_ocr.errors import OcrFailure
from receipt_ocr.ocr.receipt_processor import ReceiptProcessor
from receipt_ocr.utils.config import load_config
from receipt_ocr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.png", "*.jpg", "*.jpeg", "*.tiff", "*.tif", "*.webp")
_CSV_COLUMNS = ["filename", "item_name", "price", "status", "error"]


def _find_images(input_dir: Path) -> list[Path]:
    """Find all supported receipt images in a directory.

    Args:
        input_dir: Directory to scan for images.

    Returns:
        Sorted list of image file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def process_folder(
    input_dir: Path,
    output_csv: Path,
    verbose: bool = False,
    processor: ReceiptProcessor | None = None,
) -> dict[str, int]:
    """Parse all receipt images in a folder and export items to CSV.

    Args:
        input_dir: Directory containing receipt images.
        output_csv: Path for the output CSV file.
        verbose: Whether to print per-file progress.
        processor: Receipt processor to use. Built from config if ``None``.

    Returns:
        Summary dict with total, successful, failed, and items counts.
    """
    processor = processor or ReceiptProcessor(load_config())

    files = _find_images(input_dir)
    if not files:
        logger.warning("No receipt images found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0, "items": 0}

    logger.info("Found %d receipt images to process", len(files))

    rows: list[dict[str, object]] = []
    successful = 0
    failed = 0
    item_count = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        try:
            items = asyncio.run(processor.parse_receipt(file_path.read_bytes()))
        except (OcrFailure, OSError) as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            rows.append(
                {"filename": file_path.name, "status": "failed", "error": str(exc)}
            )
            failed += 1
            continue

        for item in items:
            rows.append(
                {
                    "filename": file_path.name,
                    "item_name": item.name,
                    "price": f"{item.price:.2f}",
                    "status": "success",
                    "error": None,
                }
            )
        if not items:
            rows.append({"filename": file_path.name, "status": "no_items"})
        item_count += len(items)
        successful += 1

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {
        "total": len(files),
        "successful": successful,
        "failed": failed,
        "items": item_count,
    }
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    """Write line-item rows to a CSV file.

    Args:
        rows: List of row dictionaries.
        output_path: Path for the output CSV file.
    """
    if not rows:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    """Print batch processing summary to stdout.

    Args:
        summary: Counts of total, successful, and failed receipts.
        output_csv: Path to the output CSV.
    """
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Items:      {summary['items']}")
    print(f"Output:     {output_csv}")


def extract_single(
    file_path: Path,
    processor: ReceiptProcessor | None = None,
) -> dict[str, object]:
    """Parse a single receipt image and return structured results.

    Args:
        file_path: Path to the receipt image.
        processor: Receipt processor to use. Built from config if ``None``.

    Returns:
        Dictionary with filename, items, and item_count.
    """
    processor = processor or ReceiptProcessor(load_config())
    items = asyncio.run(processor.parse_receipt(file_path.read_bytes()))

    return {
        "filename": file_path.name,
        "items": [item.to_dict() for item in items],
        "item_count": len(items),
    }


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Receipt OCR line-item extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of receipts")
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with receipt images"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    single_parser = subparsers.add_parser("extract", help="Parse a single receipt")
    single_parser.add_argument("file", type=Path, help="Receipt image to parse")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    args = parser.parse_args(argv)

    setup_logging(load_config().log_level)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.verbose)
    elif args.command == "extract":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        try:
            result = extract_single(args.file)
        except OcrFailure as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            sys.exit(1)
        output_str = json.dumps(result, indent=2)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
