"""
Per-field pattern table. Each field has candidates in priority order; the first match wins
and its rank sets the confidence (rank 0 -> 0.95, each further rank -0.05).
"""

from __future__ import annotations

import re
from typing import Dict, Pattern, Tuple

from entity.expense_form import FIELD_LABELS, FormField, MONETARY_FIELDS

TOP_CONFIDENCE = 0.95
RANK_PENALTY = 0.05

# Value may not run into whitespace or CJK/ASCII punctuation
_TOKEN = r"[^\s，,。]+"
_COLON = r"[:：]"


def _money_rules(label: str) -> Tuple[Pattern[str], ...]:
    return (
        # 交通費: NT$1,500 / 交通費：N$ 1,500 / 交通費: 1，500
        re.compile(rf"{label}{_COLON}\s*[Nn][Tt]?\$?\s*(\d+(?:[,，]\d{{3}})*)"),
        re.compile(rf"{label}{_COLON}\s*(\d+)"),
    )


FIELD_RULES: Dict[FormField, Tuple[Pattern[str], ...]] = {
    FormField.NAME: (
        re.compile(rf"姓名{_COLON}\s*({_TOKEN})"),
        re.compile(rf"姓名\s+({_TOKEN})"),
    ),
    FormField.DEPARTMENT: (
        re.compile(rf"部門{_COLON}\s*({_TOKEN})"),
        re.compile(rf"({_TOKEN}部)"),
    ),
    FormField.DATE: (
        re.compile(rf"日期{_COLON}\s*(\d{{4}}[-/年]\d{{1,2}}[-/月]\d{{1,2}}日?)"),
        re.compile(r"(\d{4}[-/]\d{1,2}[-/]\d{1,2})"),
    ),
    **{field: _money_rules(FIELD_LABELS[field]) for field in MONETARY_FIELDS},
}


def rule_confidence(rank: int) -> float:
    return max(0.0, round(TOP_CONFIDENCE - RANK_PENALTY * rank, 2))


def get_rules(field: FormField) -> Tuple[Pattern[str], ...]:
    return FIELD_RULES.get(FormField(field), ())


def register_rule(field: FormField, pattern: str | Pattern[str], rank: int | None = None) -> None:
    """Add a candidate pattern for a field (appended by default). The pattern needs one capture group."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    if compiled.groups < 1:
        raise ValueError(f"Pattern for {FormField(field).value} needs a capture group: {compiled.pattern}")
    rules = list(FIELD_RULES.get(FormField(field), ()))
    rules.insert(len(rules) if rank is None else rank, compiled)
    FIELD_RULES[FormField(field)] = tuple(rules)
