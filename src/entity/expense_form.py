"""Expense form entities: field identifiers, the extracted form record, per-file result."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class FormField(str, Enum):
    NAME = "name"
    DEPARTMENT = "department"
    DATE = "date"
    TRANSPORT_COST = "transport_cost"
    LODGING_COST = "lodging_cost"
    MEAL_COST = "meal_cost"
    OTHER_COST = "other_cost"
    TOTAL_COST = "total_cost"

    @property
    def label(self) -> str:
        """Display label as printed on the paper form."""
        return FIELD_LABELS[self]


FIELD_LABELS: Dict[FormField, str] = {
    FormField.NAME: "姓名",
    FormField.DEPARTMENT: "部門",
    FormField.DATE: "日期",
    FormField.TRANSPORT_COST: "交通費",
    FormField.LODGING_COST: "住宿費",
    FormField.MEAL_COST: "餐費",
    FormField.OTHER_COST: "其他",
    FormField.TOTAL_COST: "總計",
}

TEXT_FIELDS = (FormField.NAME, FormField.DEPARTMENT)
DATE_FIELDS = (FormField.DATE,)
MONETARY_FIELDS = (
    FormField.TRANSPORT_COST,
    FormField.LODGING_COST,
    FormField.MEAL_COST,
    FormField.OTHER_COST,
    FormField.TOTAL_COST,
)
# Categories that add up to the grand total in reports (total_cost is the claimant's own sum)
CATEGORY_FIELDS = MONETARY_FIELDS[:-1]


def field_from_label(label: str) -> FormField:
    """Resolve a display label (姓名) or an id (name) to a FormField."""
    for f, lbl in FIELD_LABELS.items():
        if label == lbl:
            return f
    return FormField(label)


def _zero_confidence() -> Dict[FormField, float]:
    return {f: 0.0 for f in FormField}


class ExtractedForm(BaseModel):
    """
    Structured expense-form record produced from recognized text.
    None means "not found" and is kept distinct from a real reading of 0.
    Frozen, confidence included (read-only mapping): corrections go through
    with_corrections(), which returns a new form.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    department: Optional[str] = None
    date: Optional[str] = None
    transport_cost: Optional[int] = Field(default=None, ge=0)
    lodging_cost: Optional[int] = Field(default=None, ge=0)
    meal_cost: Optional[int] = Field(default=None, ge=0)
    other_cost: Optional[int] = Field(default=None, ge=0)
    total_cost: Optional[int] = Field(default=None, ge=0)
    confidence: Dict[FormField, float] = Field(default_factory=_zero_confidence)

    @field_validator("confidence", mode="after")
    @classmethod
    def freeze_confidence(cls, value: Dict[FormField, float]) -> Mapping[FormField, float]:
        return MappingProxyType(dict(value))

    @field_serializer("confidence")
    def dump_confidence(self, value: Mapping[FormField, float]) -> Dict[FormField, float]:
        return dict(value)

    @model_validator(mode="after")
    def check_confidence(self) -> "ExtractedForm":
        missing = [f.value for f in FormField if f not in self.confidence]
        if missing:
            raise ValueError(f"confidence missing for fields: {missing}")
        for f, score in self.confidence.items():
            if not 0.0 <= score <= 1.0:
                raise ValueError(f"confidence for {f.value} out of range: {score}")
            if getattr(self, f.value) is None and score != 0.0:
                raise ValueError(f"absent field {f.value} must have confidence 0")
        return self

    def get(self, field: FormField) -> Any:
        return getattr(self, FormField(field).value)

    def amount_or_zero(self, field: FormField) -> int:
        """Rendering rule for monetary fields: absent counts as 0 everywhere (CSV, report)."""
        field = FormField(field)
        if field not in MONETARY_FIELDS:
            raise ValueError(f"Not a monetary field: {field.value}")
        value = self.get(field)
        return value if value is not None else 0

    def missing_fields(self) -> list[FormField]:
        return [f for f in FormField if self.get(f) is None]

    def with_corrections(
        self,
        values: Mapping[FormField, Any],
        confidence: Mapping[FormField, float] | None = None,
    ) -> "ExtractedForm":
        """Return a new form with values (and optionally confidences) replaced. self is untouched."""
        data: Dict[str, Any] = {f.value: self.get(f) for f in FormField}
        new_conf = dict(self.confidence)
        for f, v in values.items():
            data[FormField(f).value] = v
        for f, c in (confidence or {}).items():
            new_conf[FormField(f)] = c
        for f in FormField:
            if data[f.value] is None:
                new_conf[f] = 0.0
        data["confidence"] = new_conf
        return ExtractedForm(**data)

    def to_dict(self, labels: bool = False) -> Dict[str, Any]:
        """Flat dict of values plus a confidence map. labels=True keys by display label (姓名, ...)."""

        def key(f: FormField) -> str:
            return f.label if labels else f.value

        out: Dict[str, Any] = {key(f): self.get(f) for f in FormField}
        out["信心度" if labels else "confidence"] = {key(f): self.confidence[f] for f in FormField}
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExtractedForm":
        """Inverse of to_dict (either key style)."""
        raw_conf = data.get("confidence", data.get("信心度")) or {}
        values = {}
        for k, v in data.items():
            if k in ("confidence", "信心度"):
                continue
            values[field_from_label(k).value] = v
        conf = {field_from_label(k): float(c) for k, c in raw_conf.items()}
        return cls(**values, confidence={**_zero_confidence(), **conf})


class ProcessResult(BaseModel):
    """Output of one file run: original file name plus its extracted form."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    data: ExtractedForm

    def to_dict(self, labels: bool = False) -> Dict[str, Any]:
        return {"file_name": self.file_name, "data": self.data.to_dict(labels=labels)}
