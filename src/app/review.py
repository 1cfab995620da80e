"""Human review: flag low-confidence and overlapping fields, apply corrections to a copy of the form."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Dict, List, Mapping

from loguru import logger
from rapidfuzz import fuzz

from commons.config import config, get_section
from entity.expense_form import (
    TEXT_FIELDS,
    ExtractedForm,
    FormField,
    ProcessResult,
    field_from_label,
)
from app.extraction.text_extractor import normalize_value

DEFAULT_LOW_CONFIDENCE = 0.85
DEFAULT_OVERLAP_THRESHOLD = 90
HIGH_CONFIDENCE = 0.9
CORRECTED_CONFIDENCE = 1.0


def _review_params() -> tuple[float, float]:
    r = get_section(config, "review")
    return (
        float(r.get("low_confidence_threshold", DEFAULT_LOW_CONFIDENCE)),
        float(r.get("overlap_threshold", DEFAULT_OVERLAP_THRESHOLD)),
    )


def confidence_level(confidence: float, low_threshold: float | None = None) -> str:
    """'high' above 0.9, 'medium' above the low threshold (0.85), otherwise 'low'."""
    low = low_threshold if low_threshold is not None else _review_params()[0]
    if confidence > HIGH_CONFIDENCE:
        return "high"
    if confidence > low:
        return "medium"
    return "low"


def low_confidence_fields(form: ExtractedForm, threshold: float | None = None) -> List[FormField]:
    threshold = threshold if threshold is not None else _review_params()[0]
    return [f for f in FormField if form.confidence[f] < threshold]


def find_overlaps(form: ExtractedForm, threshold: float | None = None) -> List[tuple[FormField, FormField, float]]:
    """
    Text-field pairs with near-identical values, e.g. the department fallback rule
    picking up the same token as the name. Returns (field_a, field_b, score).
    """
    threshold = threshold if threshold is not None else _review_params()[1]
    overlaps = []
    for a, b in combinations(TEXT_FIELDS, 2):
        va, vb = form.get(a), form.get(b)
        if not va or not vb:
            continue
        score = fuzz.ratio(va, vb)
        if score >= threshold:
            overlaps.append((a, b, score))
    return overlaps


@dataclass
class ReviewReport:
    file_name: str
    low_confidence: List[FormField] = field(default_factory=list)
    overlaps: List[tuple] = field(default_factory=list)
    levels: Dict[FormField, str] = field(default_factory=dict)

    @property
    def needs_review(self) -> bool:
        return bool(self.low_confidence or self.overlaps)

    def to_dict(self) -> dict:
        return {
            "file_name": self.file_name,
            "needs_review": self.needs_review,
            "low_confidence": [f.value for f in self.low_confidence],
            "overlaps": [{"fields": [a.value, b.value], "score": s} for a, b, s in self.overlaps],
            "levels": {f.value: lvl for f, lvl in self.levels.items()},
        }


def review_form(result: ProcessResult) -> ReviewReport:
    low, overlap = _review_params()
    form = result.data
    return ReviewReport(
        file_name=result.file_name,
        low_confidence=low_confidence_fields(form, low),
        overlaps=find_overlaps(form, overlap),
        levels={f: confidence_level(form.confidence[f], low) for f in FormField},
    )


def apply_corrections(form: ExtractedForm, edits: Mapping[Any, Any]) -> ExtractedForm:
    """
    Return a corrected copy; the original form is not modified.
    Keys may be FormField, ids ('meal_cost') or labels ('餐費'). Values go through the same
    normalizers as extraction; an edited field that still has a value gets confidence 1.0.
    Blank edits clear the field.
    """
    values: Dict[FormField, Any] = {}
    conf: Dict[FormField, float] = {}
    for key, raw in edits.items():
        f = key if isinstance(key, FormField) else field_from_label(str(key))
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            value = None
        else:
            value = normalize_value(f, raw)
            if value is None:
                raise ValueError(f"Invalid value for {f.label}: {raw!r}")
        values[f] = value
        conf[f] = CORRECTED_CONFIDENCE if value is not None else 0.0
    logger.debug("Applying corrections to {}", ", ".join(f.value for f in values))
    return form.with_corrections(values, confidence=conf)


def apply_result_corrections(result: ProcessResult, edits: Mapping[Any, Any]) -> ProcessResult:
    return ProcessResult(file_name=result.file_name, data=apply_corrections(result.data, edits))
