"""Map recognized text onto ExtractedForm using the FIELD_RULES table."""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional, Pattern, Tuple

from loguru import logger

from entity.expense_form import (
    DATE_FIELDS,
    MONETARY_FIELDS,
    ExtractedForm,
    FormField,
)
from app.extraction.rules import FIELD_RULES, rule_confidence

_THOUSANDS_SEPARATORS = re.compile(r"[,，\s]")
_DATE_SEPARATORS = re.compile(r"[年月\-]")
_REPEATED_SLASH = re.compile(r"/+")


def parse_amount(raw: Any) -> Optional[int]:
    """'1,500' / '1，500' / 1500 -> 1500. Non-numeric or negative -> None."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    cleaned = _THOUSANDS_SEPARATORS.sub("", str(raw))
    try:
        value = int(cleaned)
    except ValueError:
        return None
    return value if value >= 0 else None


def normalize_date(raw: Any) -> Optional[str]:
    """'2024年7月15日' -> '2024/7/15', '2024-07-15' -> '2024/07/15'. Empty result -> None."""
    if raw is None:
        return None
    s = _DATE_SEPARATORS.sub("/", str(raw).strip()).replace("日", "")
    s = _REPEATED_SLASH.sub("/", s).strip("/")
    return s or None


def normalize_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


def normalize_value(field: FormField, raw: Any) -> Any:
    """Post-process a raw captured value by field class (monetary / date / text)."""
    field = FormField(field)
    if field in MONETARY_FIELDS:
        return parse_amount(raw)
    if field in DATE_FIELDS:
        return normalize_date(raw)
    return normalize_text(raw)


def match_field(text: str, rules: Tuple[Pattern[str], ...]) -> Tuple[Optional[str], Optional[int]]:
    """Return (captured value, rank) of the first matching rule, or (None, None)."""
    for rank, pattern in enumerate(rules):
        m = pattern.search(text)
        if m and m.group(1):
            return m.group(1), rank
    return None, None


class ExpenseFormExtractor:
    """
    Rule-table extractor. Stateless: the same text always gives an identical form.
    Unmatched or unparsable fields come back as None with confidence 0; nothing is raised.
    """

    def __init__(self, rules: Mapping[FormField, Tuple[Pattern[str], ...]] | None = None):
        # None -> read the module table on every call so register_rule() takes effect
        self._rules = rules

    @property
    def rules(self) -> Mapping[FormField, Tuple[Pattern[str], ...]]:
        return self._rules if self._rules is not None else FIELD_RULES

    def extract(self, text: str | None) -> ExtractedForm:
        text = text or ""
        values: Dict[str, Any] = {}
        confidence: Dict[FormField, float] = {}

        for field in FormField:
            raw, rank = match_field(text, self.rules.get(field, ()))
            value = normalize_value(field, raw) if raw is not None else None
            if value is None:
                if raw is not None:
                    logger.debug("Field {} matched {!r} but could not be parsed", field.value, raw)
                else:
                    logger.debug("Field {} not found", field.value)
                values[field.value] = None
                confidence[field] = 0.0
                continue
            values[field.value] = value
            confidence[field] = rule_confidence(rank)

        return ExtractedForm(**values, confidence=confidence)


_default_extractor = ExpenseFormExtractor()


def parse_expense_form(text: str | None) -> ExtractedForm:
    """Extract an ExtractedForm from OCR text with the default rule table."""
    return _default_extractor.extract(text)
