"""Tesseract OCR engine for images and PDFs (native PDF text first, then OCR per page)."""

import io
from typing import Optional

import cv2
import fitz
import numpy as np
import pytesseract
from loguru import logger
from PIL import Image

from commons.config import config, get_section
from commons.errors import RecognitionError
from commons.files import LoadedFile
from commons.ocr.base import EngineProgress

DEFAULT_LANG = "chi_tra+eng"
DEFAULT_DPI = 300


def _tesseract_config() -> tuple[int, str, bool]:
    t = get_section(config, "ocr", "tesseract")
    return (
        t.get("dpi", DEFAULT_DPI),
        t.get("lang", DEFAULT_LANG),
        t.get("use_native_pdf_text", True),
    )


def decode_image(content: bytes) -> np.ndarray:
    """Decode image bytes to a grayscale array. OpenCV first; Pillow for formats OpenCV lacks (GIF)."""
    buf = np.frombuffer(content, dtype=np.uint8)
    img = cv2.imdecode(buf, cv2.IMREAD_GRAYSCALE) if buf.size else None
    if img is not None:
        return img
    with Image.open(io.BytesIO(content)) as pil_img:
        return np.array(pil_img.convert("L"))


class TesseractEngine:
    """
    OcrEngine backed by pytesseract. Params default from config.yaml ocr.tesseract.
    Progress is reported per page (an image counts as one page).
    """

    def __init__(
        self,
        lang: str | None = None,
        dpi: int | None = None,
        use_native_pdf_text: bool | None = None,
    ):
        cfg_dpi, cfg_lang, cfg_native = _tesseract_config()
        self.lang = lang or cfg_lang
        self.dpi = dpi if dpi is not None else cfg_dpi
        self.use_native_pdf_text = cfg_native if use_native_pdf_text is None else use_native_pdf_text
        self._doc = None
        self._terminated = False

    def recognize(self, source: LoadedFile, on_progress: Optional[EngineProgress] = None) -> str:
        if self._terminated:
            raise RecognitionError("OCR engine already terminated")
        try:
            if source.is_pdf:
                return self._recognize_pdf(source, on_progress)
            return self._recognize_image(source, on_progress)
        except RecognitionError:
            raise
        except Exception as e:
            raise RecognitionError(f"OCR failed for {source.name}: {e}") from e

    def _recognize_image(self, source: LoadedFile, on_progress: Optional[EngineProgress]) -> str:
        try:
            img = decode_image(source.content)
        except (OSError, ValueError) as e:
            raise RecognitionError(f"Cannot decode image {source.name}: {e}") from e
        _report(on_progress, 0)
        text = pytesseract.image_to_string(img, lang=self.lang)
        _report(on_progress, 100)
        return text

    def _recognize_pdf(self, source: LoadedFile, on_progress: Optional[EngineProgress]) -> str:
        self._doc = fitz.open(stream=source.content, filetype="pdf")
        page_count = len(self._doc)
        if page_count == 0:
            raise RecognitionError(f"PDF has no pages: {source.name}")

        _report(on_progress, 0)
        parts = []
        for i, page in enumerate(self._doc, start=1):
            native_text = page.get_text("text") if self.use_native_pdf_text else ""
            if native_text.strip():
                logger.debug("{}: page {} has a text layer, skipping OCR", source.name, i)
                parts.append(native_text)
            else:
                pix = page.get_pixmap(dpi=self.dpi)
                img = decode_image(pix.tobytes())
                parts.append(pytesseract.image_to_string(img, lang=self.lang))
            _report(on_progress, round(i / page_count * 100))
        return "\n".join(parts)

    def terminate(self) -> None:
        """Close any open document. Safe to call more than once."""
        if self._doc is not None:
            self._doc.close()
            self._doc = None
        self._terminated = True


def _report(on_progress: Optional[EngineProgress], value: int) -> None:
    if on_progress:
        on_progress(value)
