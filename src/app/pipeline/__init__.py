"""File pipeline: single-file FileProcessor and multi-file BatchProcessor."""

from app.pipeline.batch import BatchProcessor, BatchResult, max_workers_from_config
from app.pipeline.file_processor import FileProcessor, scale_engine_progress

__all__ = ["BatchProcessor", "BatchResult", "FileProcessor", "max_workers_from_config", "scale_engine_progress"]
