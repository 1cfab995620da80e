"""OCR engines. Extend by implementing OcrEngine and registering it."""

from commons.config import config, get_section
from commons.ocr.base import EngineFactory, EngineProgress, OcrEngine
from commons.ocr.tesseract_engine import TesseractEngine

ENGINE_REGISTRY = {
    "tesseract": TesseractEngine,
}


def get_engine(name: str | None = None, **kwargs) -> OcrEngine:
    """Build a new engine instance. name defaults to config ocr.engine (tesseract)."""
    name = (name or get_section(config, "ocr").get("engine") or "tesseract").strip().lower()
    cls = ENGINE_REGISTRY.get(name)
    if cls is None:
        raise ValueError(f"Unknown OCR engine: {name}. Registered: {sorted(ENGINE_REGISTRY)}")
    return cls(**kwargs)


def register_engine(name: str, engine_class: type) -> None:
    """Register a new OCR engine (e.g. a cloud OCR client)."""
    ENGINE_REGISTRY[name.strip().lower()] = engine_class


__all__ = [
    "EngineFactory",
    "EngineProgress",
    "OcrEngine",
    "TesseractEngine",
    "ENGINE_REGISTRY",
    "get_engine",
    "register_engine",
]
