"""
Extendible commons package.

Subpackages:
  config   - ConfigProvider, YamlConfigProvider; add env/vault by implementing ConfigProvider
  io       - FileReader, FileWriter; add SharePoint/S3 by implementing these
  ocr      - OcrEngine; add cloud OCR by implementing it and calling register_engine
  folder   - FolderProcessor; list accepted files in a folder

Modules:
  errors         - FormDesk error taxonomy
  files          - accepted input types, InputFile / LoadedFile
  logging_setup  - loguru sink configuration
"""

from commons.config import config, load_config
from commons.errors import (
    FileReadError,
    FileValidationError,
    FormDeskError,
    InvalidTransitionError,
    ProcessingCancelled,
    RecognitionError,
)

__all__ = [
    "config",
    "load_config",
    "FileReadError",
    "FileValidationError",
    "FormDeskError",
    "InvalidTransitionError",
    "ProcessingCancelled",
    "RecognitionError",
]
