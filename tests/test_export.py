"""Tests for app.export."""

import json

import pytest

from app.export import (
    BOM,
    CSV_HEADERS,
    build_csv_rows,
    load_json,
    render_csv,
    summary_row,
    write_csv,
    write_json,
)
from app.extraction import parse_expense_form
from entity.expense_form import ExtractedForm, FormField, ProcessResult


def _result(name, text):
    return ProcessResult(file_name=name, data=parse_expense_form(text))


def test_headers_fixed_order():
    assert CSV_HEADERS == ["檔案名稱", "姓名", "部門", "日期", "交通費", "住宿費", "餐費", "其他", "總計"]


def test_row_renders_absent_amounts_as_zero_and_text_as_blank(sample_text):
    rows = build_csv_rows([_result("a.jpg", sample_text), ProcessResult(file_name="b.jpg", data=ExtractedForm())])
    assert rows[0] == ["a.jpg", "王小明", "研發部", "2024/07/15", 1500, 3000, 800, 0, 5300]
    assert rows[1] == ["b.jpg", "", "", "", 0, 0, 0, 0, 0]


def test_render_csv_has_bom_and_header(sample_text):
    text = render_csv([_result("a.jpg", sample_text)])
    assert text.startswith(BOM)
    lines = text[len(BOM):].splitlines()
    assert lines[0] == ",".join(CSV_HEADERS)
    assert lines[1] == "a.jpg,王小明,研發部,2024/07/15,1500,3000,800,0,5300"


def test_write_csv_utf8_with_bom(tmp_path, sample_text):
    out = tmp_path / "out" / "forms.csv"
    path = write_csv([_result("a.jpg", sample_text)], str(out))
    assert path == str(out)
    raw = out.read_bytes()
    assert raw.startswith(b"\xef\xbb\xbf")
    assert "王小明" in raw.decode("utf-8-sig")


def test_write_csv_nothing_to_write(tmp_path):
    assert write_csv([], str(tmp_path / "x.csv")) == ""
    assert not (tmp_path / "x.csv").exists()


def test_summary_row_sums_amount_columns(sample_text):
    results = [_result("a.jpg", sample_text), _result("b.jpg", "交通費: NT$500\n其他: NT$200")]
    row = summary_row(results)
    assert row[4:] == [2000, 3000, 800, 200, 5300]


def test_write_json_keeps_confidence(tmp_path, sample_text):
    out = tmp_path / "forms.json"
    write_json([_result("a.jpg", sample_text)], str(out))
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data[0]["file_name"] == "a.jpg"
    assert data[0]["data"]["confidence"]["other_cost"] == 0
    assert ExtractedForm.from_dict(data[0]["data"]).total_cost == 5300


def test_load_json_reads_back_hand_corrected_records(tmp_path, sample_text):
    out = tmp_path / "forms.json"
    write_json([_result("a.jpg", sample_text), _result("b.jpg", "")], str(out))
    data = json.loads(out.read_text(encoding="utf-8"))
    data[0]["data"]["other_cost"] = 200
    data[0]["data"]["confidence"]["other_cost"] = 1.0
    out.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    results = load_json(str(out))

    assert [r.file_name for r in results] == ["a.jpg", "b.jpg"]
    assert results[0].data.other_cost == 200
    assert results[0].data.confidence[FormField.OTHER_COST] == 1.0
    assert results[0].data.name == "王小明"
    assert results[1].data == ExtractedForm()
    assert build_csv_rows(results)[0][7] == 200


def test_load_json_rejects_edits_that_break_the_form(tmp_path, sample_text):
    out = tmp_path / "forms.json"
    write_json([_result("a.jpg", sample_text)], str(out))
    data = json.loads(out.read_text(encoding="utf-8"))
    data[0]["data"]["name"] = None
    out.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    with pytest.raises(ValueError, match="must have confidence 0"):
        load_json(str(out))


def test_load_json_requires_a_list(tmp_path):
    out = tmp_path / "forms.json"
    out.write_text('{"file_name": "a.jpg"}', encoding="utf-8")
    with pytest.raises(ValueError, match="Expected a list"):
        load_json(str(out))
