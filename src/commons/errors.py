"""Error taxonomy. Unmatched fields are not errors: they come back as None with confidence 0."""


class FormDeskError(Exception):
    """Base for all FormDesk errors."""


class FileValidationError(FormDeskError, ValueError):
    """File type not accepted. Raised before any job is created."""

    def __init__(self, file_name: str, mime_type: str | None = None):
        self.file_name = file_name
        self.mime_type = mime_type
        super().__init__(
            f"Unsupported file type: {file_name!r} (type {mime_type or 'unknown'}). "
            "Accepted: JPEG, PNG, GIF, WEBP, PDF"
        )


class FileReadError(FormDeskError, OSError):
    """File missing or cannot be read into memory."""


class RecognitionError(FormDeskError):
    """OCR engine failed."""


class ProcessingCancelled(FormDeskError):
    """Run stopped at a step boundary because its cancel event was set."""


class InvalidTransitionError(FormDeskError):
    """Illegal job status change (e.g. completed -> processing)."""
