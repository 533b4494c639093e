"""Tests for the OCR engine boundary and Tesseract wrapper."""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from receipt_ocr.ocr.engine import OCREngine, OCRResult, ocr_session
from receipt_ocr.ocr.tesseract_engine import TesseractEngine


class TestOCRSession:
    """Tests for scoped engine acquisition."""

    def test_acquire_and_release(self, stub_engine) -> None:
        with ocr_session(stub_engine) as engine:
            assert engine is stub_engine
            assert stub_engine.acquired == 1
            assert stub_engine.released == 0
        assert stub_engine.released == 1

    def test_release_on_error(self, stub_engine_factory) -> None:
        engine = stub_engine_factory(error=RuntimeError("boom"))
        with pytest.raises(RuntimeError, match="boom"):
            with ocr_session(engine) as active:
                active.recognize(b"image")
        assert engine.acquired == 1
        assert engine.released == 1

    def test_stub_satisfies_protocol(self, stub_engine) -> None:
        assert isinstance(stub_engine, OCREngine)

    def test_tesseract_satisfies_protocol(self) -> None:
        with patch("receipt_ocr.ocr.tesseract_engine.pytesseract"):
            assert isinstance(TesseractEngine(), OCREngine)


class TestTesseractEngine:
    """Tests for the TesseractEngine class (mocked)."""

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_recognize_array(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.image_to_string.return_value = "Burger 10.00\nFries 5,50"

        engine = TesseractEngine(default_lang="eng", psm=6)
        with ocr_session(engine):
            result = engine.recognize(np.zeros((100, 200), dtype=np.uint8))

        assert isinstance(result, OCRResult)
        assert result.text == "Burger 10.00\nFries 5,50"
        assert result.language == "eng"
        _, kwargs = mock_pytesseract.image_to_string.call_args
        assert kwargs["lang"] == "eng"
        assert kwargs["config"] == "--psm 6"

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_recognize_bytes(self, mock_pytesseract: MagicMock, png_bytes: bytes) -> None:
        mock_pytesseract.image_to_string.return_value = "Tea 3.20"

        engine = TesseractEngine()
        with ocr_session(engine):
            result = engine.recognize(png_bytes)

        assert result.text == "Tea 3.20"
        pil_image = mock_pytesseract.image_to_string.call_args[0][0]
        assert pil_image.size == (200, 100)

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_recognize_bytes_applies_exif_orientation(
        self, mock_pytesseract: MagicMock, sideways_jpeg_bytes: bytes
    ) -> None:
        mock_pytesseract.image_to_string.return_value = "Tea 3.20"

        engine = TesseractEngine()
        with ocr_session(engine):
            engine.recognize(sideways_jpeg_bytes)

        pil_image = mock_pytesseract.image_to_string.call_args[0][0]
        assert pil_image.size == (300, 400)

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_custom_lang(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.image_to_string.return_value = "Bonjour"

        engine = TesseractEngine(default_lang="fra")
        with ocr_session(engine):
            result = engine.recognize(np.zeros((10, 10), dtype=np.uint8))

        assert result.language == "fra"

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_recognize_requires_session(self, mock_pytesseract: MagicMock) -> None:
        engine = TesseractEngine()
        with pytest.raises(RuntimeError, match="without acquire"):
            engine.recognize(np.zeros((10, 10), dtype=np.uint8))
        mock_pytesseract.image_to_string.assert_not_called()

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_session_lifecycle(self, mock_pytesseract: MagicMock) -> None:
        engine = TesseractEngine()
        assert not engine.active
        with ocr_session(engine):
            assert engine.active
        assert not engine.active
        mock_pytesseract.get_tesseract_version.assert_called_once()

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_overlapping_sessions(self, mock_pytesseract: MagicMock) -> None:
        engine = TesseractEngine()
        engine.acquire()
        engine.acquire()
        engine.release()
        assert engine.active
        engine.release()
        assert not engine.active

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_acquire_fails_without_binary(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.get_tesseract_version.side_effect = OSError("not found")
        engine = TesseractEngine()
        with pytest.raises(OSError):
            engine.acquire()
        assert not engine.active

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_is_available(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.get_tesseract_version.return_value = "5.3.0"
        assert TesseractEngine().is_available()

    @patch("receipt_ocr.ocr.tesseract_engine.pytesseract")
    def test_is_available_without_binary(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.get_tesseract_version.side_effect = OSError("not found")
        engine = TesseractEngine()
        assert not engine.is_available()
        assert not engine.active

    def test_custom_tesseract_cmd(self) -> None:
        with patch("receipt_ocr.ocr.tesseract_engine.pytesseract") as mock_pt:
            TesseractEngine(tesseract_cmd="/usr/bin/tesseract")
            assert mock_pt.pytesseract.tesseract_cmd == "/usr/bin/tesseract"
