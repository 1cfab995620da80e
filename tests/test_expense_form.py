"""Tests for entity.expense_form and entity.file_job."""

import pytest
from pydantic import ValidationError

from app.extraction import parse_expense_form
from commons.errors import InvalidTransitionError
from entity.expense_form import ExtractedForm, FormField, ProcessResult, field_from_label
from entity.file_job import FileJob, JobStatus


def test_default_form_has_zero_confidence_for_every_field():
    form = ExtractedForm()
    assert set(form.confidence) == set(FormField)
    assert all(c == 0 for c in form.confidence.values())
    assert form.missing_fields() == list(FormField)


def test_missing_confidence_entry_rejected():
    with pytest.raises(ValidationError, match="confidence missing"):
        ExtractedForm(name="王小明", confidence={FormField.NAME: 0.95})


def test_absent_field_with_confidence_rejected():
    conf = {f: 0.0 for f in FormField}
    conf[FormField.NAME] = 0.9
    with pytest.raises(ValidationError, match="must have confidence 0"):
        ExtractedForm(confidence=conf)


def test_negative_amount_rejected():
    with pytest.raises(ValidationError):
        ExtractedForm(meal_cost=-1)


def test_form_is_frozen():
    form = ExtractedForm()
    with pytest.raises(ValidationError):
        form.name = "x"
    with pytest.raises(TypeError):
        form.confidence[FormField.OTHER_COST] = 0.7
    with pytest.raises(AttributeError):
        form.confidence.pop(FormField.NAME)
    assert form.confidence[FormField.OTHER_COST] == 0
    assert set(form.confidence) == set(FormField)


def test_confidence_of_extracted_form_cannot_be_edited(sample_text):
    form = parse_expense_form(sample_text)
    with pytest.raises(TypeError):
        form.confidence[FormField.OTHER_COST] = 0.7
    assert form.other_cost is None
    assert form.confidence[FormField.OTHER_COST] == 0
    assert form.to_dict()["confidence"]["other_cost"] == 0


def test_with_corrections_returns_new_form():
    conf = {f: 0.0 for f in FormField}
    conf[FormField.NAME] = 0.9
    form = ExtractedForm(name="王小民", confidence=conf)
    fixed = form.with_corrections({FormField.NAME: "王小明"}, confidence={FormField.NAME: 1.0})
    assert fixed.name == "王小明"
    assert fixed.confidence[FormField.NAME] == 1.0
    assert form.name == "王小民"
    assert form.confidence[FormField.NAME] == 0.9
    assert fixed.model_dump()["confidence"][FormField.NAME] == 1.0


def test_amount_or_zero():
    form = ExtractedForm()
    assert form.amount_or_zero(FormField.OTHER_COST) == 0
    with pytest.raises(ValueError):
        form.amount_or_zero(FormField.NAME)


def test_to_dict_with_labels_round_trips():
    conf = {f: 0.0 for f in FormField}
    conf[FormField.MEAL_COST] = 0.95
    form = ExtractedForm(meal_cost=800, confidence=conf)
    d = form.to_dict(labels=True)
    assert d["餐費"] == 800
    assert d["信心度"]["餐費"] == 0.95
    assert ExtractedForm.from_dict(d) == form
    assert ExtractedForm.from_dict(form.to_dict()) == form


def test_field_from_label():
    assert field_from_label("總計") is FormField.TOTAL_COST
    assert field_from_label("total_cost") is FormField.TOTAL_COST
    assert FormField.DATE.label == "日期"


def test_process_result_to_dict():
    result = ProcessResult(file_name="a.jpg", data=ExtractedForm())
    assert result.to_dict()["file_name"] == "a.jpg"
    assert result.to_dict()["data"]["confidence"]["name"] == 0.0


class TestFileJob:
    def test_happy_path(self):
        job = FileJob(name="a.jpg")
        assert job.status is JobStatus.QUEUED
        job.start()
        job.update_progress(40)
        assert job.progress == 40
        job.complete()
        assert job.status is JobStatus.COMPLETED
        assert job.progress == 100
        assert job.done

    def test_error_resets_progress(self):
        job = FileJob(name="a.jpg")
        job.start()
        job.update_progress(60)
        job.fail(RuntimeError("boom"))
        assert job.status is JobStatus.ERROR
        assert job.progress == 0
        assert job.error == "boom"

    def test_progress_never_decreases_and_is_ignored_when_not_processing(self):
        job = FileJob(name="a.jpg")
        job.update_progress(50)
        assert job.progress == 0
        job.start()
        job.update_progress(50)
        job.update_progress(20)
        assert job.progress == 50

    @pytest.mark.parametrize("action", ["complete", "fail"])
    def test_cannot_finish_queued_job(self, action):
        job = FileJob(name="a.jpg")
        with pytest.raises(InvalidTransitionError):
            getattr(job, action)(*(["x"] if action == "fail" else []))

    def test_cannot_restart_completed_job(self):
        job = FileJob(name="a.jpg")
        job.start()
        job.complete()
        with pytest.raises(InvalidTransitionError):
            job.start()

    def test_ids_are_unique(self):
        assert FileJob(name="a").id != FileJob(name="a").id
