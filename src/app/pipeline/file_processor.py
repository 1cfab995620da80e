"""
Single-file pipeline: load -> recognize -> extract, with progress reported on a 0-100 scale.

    load        0 -> 10
    recognize  10 -> 90   (engine progress p reported as 10 + round(p * 0.8))
    extract    90 -> 100
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from loguru import logger

from commons.errors import FileReadError, ProcessingCancelled, RecognitionError
from commons.files import InputFile, LoadedFile
from commons.io.base import FileReader
from commons.io.local import LocalFileReader
from commons.ocr import get_engine
from commons.ocr.base import EngineFactory
from entity.expense_form import ProcessResult
from app.extraction.text_extractor import ExpenseFormExtractor

ProgressCallback = Callable[[int], None]

LOAD_DONE = 10
RECOGNIZE_DONE = 90
COMPLETE = 100


def scale_engine_progress(engine_progress: float) -> int:
    """Map engine progress (0-100) into the 10-90 band."""
    return LOAD_DONE + round(engine_progress * 0.8)


class _ProgressReporter:
    """Forwards progress to the caller's callback: clamped to 0-100, never decreasing, errors logged and dropped."""

    def __init__(self, callback: Optional[ProgressCallback], file_name: str):
        self._callback = callback
        self._file_name = file_name
        self._last = -1

    def __call__(self, value: float) -> None:
        value = max(0, min(COMPLETE, int(value)))
        if value < self._last:
            value = self._last
        self._last = value
        if self._callback is None:
            return
        try:
            self._callback(value)
        except Exception as e:
            logger.warning("Progress callback failed for {}: {}", self._file_name, e)


def _check_cancel(cancel_event: Optional[threading.Event], file_name: str, step: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info("{}: cancelled before {}", file_name, step)
        raise ProcessingCancelled(f"Processing of {file_name} cancelled before {step}")


class FileProcessor:
    """
    Drives one file through the pipeline. Each process() call acquires its own engine
    from engine_factory and terminates it before returning or raising, so separate
    calls (e.g. on worker threads) share nothing. No retries.
    """

    def __init__(
        self,
        engine_factory: EngineFactory | None = None,
        extractor: ExpenseFormExtractor | None = None,
        reader: FileReader | None = None,
        lang: str | None = None,
    ):
        self.engine_factory = engine_factory or get_engine
        self.extractor = extractor or ExpenseFormExtractor()
        self.reader = reader or LocalFileReader()
        self.lang = lang

    def load(self, input_file: InputFile | str | None) -> LoadedFile:
        if input_file is None:
            raise FileReadError("No file provided")
        if isinstance(input_file, str):
            input_file = InputFile(path=input_file)
        content = self.reader.read_bytes(input_file.path)
        return LoadedFile(name=input_file.name, content=content, mime_type=input_file.mime_type)

    def _new_engine(self):
        if self.lang:
            return self.engine_factory(lang=self.lang)
        return self.engine_factory()

    def recognize(self, loaded: LoadedFile, report: ProgressCallback) -> str:
        """Any engine failure, including failing to start one, surfaces as RecognitionError."""
        try:
            engine = self._new_engine()
        except Exception as e:
            raise RecognitionError(f"Cannot start OCR engine: {e}") from e
        try:
            return engine.recognize(loaded, lambda p: report(scale_engine_progress(p)))
        except RecognitionError:
            raise
        except Exception as e:
            raise RecognitionError(f"OCR failed for {loaded.name}: {e}") from e
        finally:
            engine.terminate()

    def process(
        self,
        input_file: InputFile | str | None,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ProcessResult:
        """
        Run load -> recognize -> extract and return {file_name, data}.
        Raises FileReadError, RecognitionError or ProcessingCancelled; 100 is only reported on success.
        """
        if isinstance(input_file, str):
            input_file = InputFile(path=input_file)
        name = (input_file.name if input_file is not None else "") or "<no file>"
        report = _ProgressReporter(on_progress, name)

        try:
            _check_cancel(cancel_event, name, "load")
            report(0)
            loaded = self.load(input_file)
            report(LOAD_DONE)
            logger.info("{}: loaded {} bytes", loaded.name, len(loaded.content))

            _check_cancel(cancel_event, name, "recognition")
            text = self.recognize(loaded, report)
            report(RECOGNIZE_DONE)
            logger.info("{}: recognized {} characters", loaded.name, len(text or ""))

            _check_cancel(cancel_event, name, "extraction")
            form = self.extractor.extract(text)
            report(COMPLETE)
        except ProcessingCancelled:
            raise
        except Exception as e:
            logger.error("Processing {} failed: {}", name, e)
            raise

        missing = form.missing_fields()
        if missing:
            logger.info("{}: fields not found: {}", loaded.name, ", ".join(f.value for f in missing))
        return ProcessResult(file_name=loaded.name, data=form)
