"""Spending report over a batch of results: category totals, per-claimant totals, headline stats."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from entity.expense_form import CATEGORY_FIELDS, FormField, ProcessResult

UNKNOWN_CLAIMANT = "未知"


@dataclass
class Bar:
    label: str
    amount: int
    share: float  # fraction of grand_total, 0 when grand_total is 0

    def to_dict(self) -> dict:
        return {"label": self.label, "amount": self.amount, "share": self.share}


@dataclass
class ExpenseReport:
    category_totals: Dict[FormField, int]
    grand_total: int
    claimant_count: int
    average_per_claimant: int
    highest_total: int
    category_bars: List[Bar] = field(default_factory=list)
    claimant_bars: List[Bar] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "category_totals": {f.value: v for f, v in self.category_totals.items()},
            "grand_total": self.grand_total,
            "claimant_count": self.claimant_count,
            "average_per_claimant": self.average_per_claimant,
            "highest_total": self.highest_total,
            "category_bars": [b.to_dict() for b in self.category_bars],
            "claimant_bars": [b.to_dict() for b in self.claimant_bars],
        }


def _share(amount: int, total: int) -> float:
    return amount / total if total > 0 else 0.0


def build_report(results: Sequence[ProcessResult]) -> ExpenseReport:
    """
    grand_total is the sum of the category columns (transport, lodging, meal, other);
    claimant bars and highest_total use each form's own total_cost.
    """
    category_totals = {
        f: sum(r.data.amount_or_zero(f) for r in results) for f in CATEGORY_FIELDS
    }
    grand_total = sum(category_totals.values())
    count = len(results)
    totals = [r.data.amount_or_zero(FormField.TOTAL_COST) for r in results]

    return ExpenseReport(
        category_totals=category_totals,
        grand_total=grand_total,
        claimant_count=count,
        average_per_claimant=round(grand_total / count) if count else 0,
        highest_total=max(totals) if totals else 0,
        category_bars=[
            Bar(f.label, amount, _share(amount, grand_total))
            for f, amount in category_totals.items()
        ],
        claimant_bars=[
            Bar(r.data.name or UNKNOWN_CLAIMANT, t, _share(t, grand_total))
            for r, t in zip(results, totals)
        ],
    )


def format_amount(amount: int) -> str:
    return f"NT$ {amount:,}"
