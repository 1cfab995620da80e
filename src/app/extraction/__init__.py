"""Text-to-form extraction: rule table and extractor. Extend with register_rule."""

from app.extraction.rules import FIELD_RULES, get_rules, register_rule, rule_confidence
from app.extraction.text_extractor import (
    ExpenseFormExtractor,
    normalize_date,
    normalize_value,
    parse_amount,
    parse_expense_form,
)

__all__ = [
    "FIELD_RULES",
    "get_rules",
    "register_rule",
    "rule_confidence",
    "ExpenseFormExtractor",
    "normalize_date",
    "normalize_value",
    "parse_amount",
    "parse_expense_form",
]
