"""
FormDesk application layer: extraction, file pipeline, export, report, review.

Subpackages / modules:
  extraction  - FIELD_RULES table and ExpenseFormExtractor; add patterns via register_rule
  pipeline    - FileProcessor (one file) and BatchProcessor (many files, FileJob tracking)
  export      - CSV (UTF-8 with BOM) and JSON writers
  report      - spending report over a batch
  review      - low-confidence / overlap flags and corrections
"""

from app.extraction import ExpenseFormExtractor, parse_expense_form, register_rule
from app.pipeline import BatchProcessor, BatchResult, FileProcessor

__all__ = [
    "ExpenseFormExtractor",
    "parse_expense_form",
    "register_rule",
    "BatchProcessor",
    "BatchResult",
    "FileProcessor",
]
