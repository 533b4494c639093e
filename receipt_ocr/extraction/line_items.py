"""Receipt line-item extraction from raw OCR text.

Each OCR line is classified on its own as a priced item or as noise.
A line becomes an item only when it ends in a two-decimal price, is not
receipt boilerplate (totals, tax, payment method, timestamps), and the
cleaned name and normalized price pass a final sanity check. Rejections
are silent: the result simply has fewer items.
"""

import math
import re
from dataclasses import asdict, dataclass
from enum import StrEnum

from receipt_ocr.utils.config import ExtractionConfig
from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)

# Amount with optional thousands groups and a mandatory 2-digit decimal part,
# e.g. "5,50", "10.00", "1.234,56", "1,234.56", "1 234,56".
_PRICE_PATTERN = r"\d{1,3}(?:[., ]\d{3})*[.,]\d{2}"

# Dot leaders and rules OCR renders between a name and its price.
_LEADER_CHARS = ".|_…–—-"

_PRICE_LINE_RE = re.compile(
    rf"^(?P<name>.+?)"
    rf"(?:\s+|\s*[{re.escape(_LEADER_CHARS)}]{{2,}}\s*)"
    rf"(?P<price>{_PRICE_PATTERN})\s*$"
)

_TRAILING_NOISE_RE = re.compile(rf"[\s{re.escape(_LEADER_CHARS)}]+$")

# Anything except letters, digits, whitespace and % & ( ) -
_NAME_NOISE_RE = re.compile(r"[^\w\s%&()\-]|_")


class SeparatorStyle(StrEnum):
    """Separator symbols present in a matched price token."""

    DOT = "dot"
    COMMA = "comma"
    MIXED = "mixed"


@dataclass(frozen=True)
class PriceToken:
    """A price-shaped substring before normalization."""

    raw: str
    style: SeparatorStyle


@dataclass
class LineItem:
    """One extracted receipt entry."""

    name: str
    price: float

    def to_dict(self) -> dict[str, str | float]:
        return asdict(self)


def detect_separator_style(raw_price: str) -> SeparatorStyle:
    """Classify which of ``.`` and ``,`` appear in a price token."""
    has_dot = "." in raw_price
    has_comma = "," in raw_price
    if has_dot and has_comma:
        return SeparatorStyle.MIXED
    if has_comma:
        return SeparatorStyle.COMMA
    return SeparatorStyle.DOT


def is_boilerplate(line: str, keywords: list[str]) -> bool:
    """Return True if the line mentions a non-item receipt keyword."""
    lowered = line.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def match_price_line(line: str) -> tuple[str, PriceToken] | None:
    """Split a line into its raw name and trailing price token.

    Returns:
        Tuple of (raw_name, price_token), or ``None`` if the line does
        not end in a two-decimal amount.
    """
    match = _PRICE_LINE_RE.match(line)
    if not match:
        return None
    raw_price = match.group("price")
    return match.group("name"), PriceToken(
        raw=raw_price, style=detect_separator_style(raw_price)
    )


def clean_name(raw_name: str) -> str:
    """Strip dot leaders and stray OCR symbols from an item name.

    Keeps letters, digits, whitespace and ``% & ( ) -``.
    """
    name = _TRAILING_NOISE_RE.sub("", raw_name.strip())
    name = _NAME_NOISE_RE.sub("", name)
    return name.strip()


def normalize_price(raw_price: str) -> float | None:
    """Convert a price token in any grouping convention to a float.

    The rightmost ``,`` or ``.`` is the decimal separator; every other
    separator is thousands grouping. ``"1.234,56"`` and ``"1,234.56"``
    both give ``1234.56``.

    Returns:
        Parsed value, or ``None`` if the token is not numeric.
    """
    compact = re.sub(r"\s+", "", raw_price)
    decimal_at = max(compact.rfind(","), compact.rfind("."))

    if decimal_at == -1:
        number = compact
    else:
        whole = re.sub(r"[.,]", "", compact[:decimal_at])
        number = f"{whole}.{compact[decimal_at + 1:]}"

    try:
        return float(number)
    except ValueError:
        return None


def is_sane(
    name: str,
    price: float | None,
    min_name_length: int = 2,
    max_price: float = 10000.0,
) -> bool:
    """Final acceptance gate for a candidate line item."""
    if len(name) < min_name_length:
        return False
    if price is None or not math.isfinite(price):
        return False
    return 0 < price < max_price


def classify_line(line: str, config: ExtractionConfig | None = None) -> LineItem | None:
    """Classify a single OCR line as a line item or noise.

    Args:
        line: One line of OCR output.
        config: Extraction settings. Defaults to ``ExtractionConfig()``.

    Returns:
        The extracted item, or ``None`` if the line is rejected.
    """
    config = config or ExtractionConfig()
    candidate = line.strip()

    if len(candidate) < config.min_line_length:
        return None

    if is_boilerplate(candidate, config.boilerplate_keywords):
        logger.debug("Skipping boilerplate line: %r", candidate)
        return None

    matched = match_price_line(candidate)
    if matched is None:
        return None

    raw_name, token = matched
    name = clean_name(raw_name)
    price = normalize_price(token.raw)

    if not is_sane(name, price, config.min_name_length, config.max_price):
        logger.debug(
            "Rejected candidate %r (name=%r, price=%r, separators=%s)",
            candidate,
            name,
            price,
            token.style,
        )
        return None

    return LineItem(name=name, price=price)


class LineItemExtractor:
    """Heuristic extractor turning receipt OCR text into line items.

    Lines are classified independently and in order; no line is merged
    with its neighbours.

    Args:
        config: Extraction settings (keywords, length and price limits).
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def extract(self, text: str) -> list[LineItem]:
        """Extract line items from OCR text.

        Args:
            text: Plain text produced by the OCR engine.

        Returns:
            Items in the order they appear on the receipt. May be empty.
        """
        items: list[LineItem] = []

        for line in text.splitlines():
            item = classify_line(line, self.config)
            if item is not None:
                items.append(item)

        if not items and text.strip():
            logger.warning(
                "OCR produced text but no line items matched. Raw text sample: %r",
                text[: self.config.diagnostic_sample_chars],
            )

        logger.info("Line-item extraction found %d items", len(items))
        return items


def extract_line_items(
    text: str, config: ExtractionConfig | None = None
) -> list[LineItem]:
    """Extract line items from OCR text with the given settings."""
    return LineItemExtractor(config).extract(text)
