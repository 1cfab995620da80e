"""Write extraction results as spreadsheet-friendly CSV (UTF-8 with BOM) or full JSON records; load JSON back."""

from __future__ import annotations

import csv
import io
import os
from typing import Iterable, List, Sequence

from loguru import logger

from commons.config import config, get_section
from commons.io.local import LocalFileReader, LocalFileWriter
from entity.expense_form import (
    FIELD_LABELS,
    MONETARY_FIELDS,
    ExtractedForm,
    FormField,
    ProcessResult,
)

BOM = "\ufeff"
CSV_ENCODING = "utf-8"
DEFAULT_CSV_FILENAME = "研發部_7月份_出差報銷表.csv"
CSV_HEADERS = ["檔案名稱"] + [FIELD_LABELS[f] for f in FormField]

_reader = LocalFileReader()
_writer = LocalFileWriter()


def default_csv_path() -> str:
    """Output path from config export.output_dir / export.csv_filename."""
    export_cfg = get_section(config, "export")
    return os.path.join(
        export_cfg.get("output_dir") or "output",
        export_cfg.get("csv_filename") or DEFAULT_CSV_FILENAME,
    )


def csv_row(result: ProcessResult) -> list:
    """One row in CSV_HEADERS order. Absent text -> '', absent amount -> 0 (every monetary column alike)."""
    row: list = [result.file_name or ""]
    for f in FormField:
        if f in MONETARY_FIELDS:
            row.append(result.data.amount_or_zero(f))
        else:
            row.append(result.data.get(f) or "")
    return row


def build_csv_rows(results: Iterable[ProcessResult]) -> List[list]:
    return [csv_row(r) for r in results]


def summary_row(results: Sequence[ProcessResult]) -> list:
    """Column sums for the preview table; text columns left blank."""
    row: list = ["合計"]
    for f in FormField:
        if f in MONETARY_FIELDS:
            row.append(sum(r.data.amount_or_zero(f) for r in results))
        else:
            row.append("")
    return row


def render_csv(results: Iterable[ProcessResult], include_bom: bool = True) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(build_csv_rows(results))
    return (BOM if include_bom else "") + buf.getvalue()


def write_csv(results: Iterable[ProcessResult], path: str | None = None) -> str:
    """Write the CSV and return its path. An empty result list writes nothing and returns ''."""
    results = list(results)
    if not results:
        logger.warning("No results to export")
        return ""
    path = path or default_csv_path()
    _writer.write_text(render_csv(results), path, encoding=CSV_ENCODING)
    logger.info("CSV with {} rows saved to {}", len(results), path)
    return path


def write_json(results: Iterable[ProcessResult], path: str) -> str:
    """Full records including per-field confidence."""
    data = [r.to_dict() for r in results]
    _writer.write_json(data, path)
    logger.info("JSON with {} records saved to {}", len(data), path)
    return path


def load_json(path: str) -> List[ProcessResult]:
    """
    Read records written by write_json (possibly hand-corrected) back into results.
    Records are re-validated, so an edited file that breaks the form rules raises.
    """
    data = _reader.read_json(path)
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of records in {path}")
    results = [
        ProcessResult(file_name=rec["file_name"], data=ExtractedForm.from_dict(rec["data"]))
        for rec in data
    ]
    logger.info("Loaded {} records from {}", len(results), path)
    return results
