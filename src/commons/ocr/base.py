"""Protocol for OCR engines. Implement for different engines (Tesseract, cloud OCR, etc.)."""

from typing import Callable, Optional, Protocol

from commons.files import LoadedFile

# Receives engine progress on a 0-100 scale
EngineProgress = Callable[[int], None]


class OcrEngine(Protocol):
    """
    Recognize text in an image or PDF. One instance serves one file run:
    the caller acquires it, calls recognize() once and terminate() exactly once.
    """

    def recognize(self, source: LoadedFile, on_progress: Optional[EngineProgress] = None) -> str:
        """Return recognized text. Wrap engine failures in RecognitionError."""
        ...

    def terminate(self) -> None:
        """Release engine resources."""
        ...


# Builds a fresh engine per file run; lang overrides the configured language hint
EngineFactory = Callable[..., OcrEngine]
