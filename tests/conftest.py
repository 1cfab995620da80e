"""Pytest fixtures and configuration. Run from project root with: PYTHONPATH=src pytest tests/ -v"""

import os
import sys
from pathlib import Path

import pytest

# Ensure src is on path so imports like commons.*, entity.* work
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC = PROJECT_ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Optional: set working directory so relative paths in config resolve
os.chdir(PROJECT_ROOT)

from commons.errors import RecognitionError  # noqa: E402

SAMPLE_TEXT = (
    "姓名: 王小明\n部門: 研發部\n日期: 2024-07-15\n"
    "交通費: NT$1,500\n住宿費: NT$3,000\n餐費: NT$800\n總計: NT$5,300"
)


class FakeEngine:
    """OcrEngine stand-in: returns fixed text, emits the given progress steps, counts terminate calls."""

    def __init__(self, text=SAMPLE_TEXT, steps=(0, 50, 100), fail_at=None, lang=None):
        self.text = text
        self.steps = steps
        self.fail_at = fail_at
        self.lang = lang
        self.recognize_calls = 0
        self.terminate_calls = 0

    def recognize(self, source, on_progress=None):
        self.recognize_calls += 1
        for step in self.steps:
            if self.fail_at is not None and step >= self.fail_at:
                raise RecognitionError(f"engine blew up at {step}")
            if on_progress:
                on_progress(step)
        return self.text

    def terminate(self):
        self.terminate_calls += 1


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT


@pytest.fixture
def image_file(tmp_path):
    f = tmp_path / "form1.jpg"
    f.write_bytes(b"\xff\xd8\xff fake jpeg")
    return f


@pytest.fixture
def engines():
    """Engine factory recording every engine it hands out."""

    class Factory:
        def __init__(self):
            self.created = []
            self.kwargs = {}

        def __call__(self, **kwargs):
            engine = FakeEngine(**{**self.kwargs, **kwargs})
            self.created.append(engine)
            return engine

    return Factory()
