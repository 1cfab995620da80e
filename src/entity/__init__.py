"""Shared entities: expense form record, field identifiers, upload jobs."""

from entity.expense_form import (
    CATEGORY_FIELDS,
    DATE_FIELDS,
    FIELD_LABELS,
    MONETARY_FIELDS,
    TEXT_FIELDS,
    ExtractedForm,
    FormField,
    ProcessResult,
    field_from_label,
)
from entity.file_job import FileJob, JobStatus

__all__ = [
    "CATEGORY_FIELDS",
    "DATE_FIELDS",
    "FIELD_LABELS",
    "MONETARY_FIELDS",
    "TEXT_FIELDS",
    "ExtractedForm",
    "FormField",
    "ProcessResult",
    "field_from_label",
    "FileJob",
    "JobStatus",
]
