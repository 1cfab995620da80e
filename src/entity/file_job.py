"""Upload job lifecycle, owned by the caller (batch runner / CLI), not by the pipeline."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from commons.errors import InvalidTransitionError


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


_ALLOWED = {
    JobStatus.QUEUED: {JobStatus.PROCESSING},
    JobStatus.PROCESSING: {JobStatus.COMPLETED, JobStatus.ERROR},
    JobStatus.COMPLETED: set(),
    JobStatus.ERROR: set(),
}


def _new_job_id() -> str:
    return f"file_{uuid.uuid4().hex[:12]}"


@dataclass
class FileJob:
    """
    One upload: queued -> processing -> completed | error, plus a progress counter (0-100).
    Progress is only accepted while processing and never moves backwards.
    """
    name: str
    size: str = "0 Bytes"
    id: str = field(default_factory=_new_job_id)
    status: JobStatus = JobStatus.QUEUED
    progress: int = 0
    error: Optional[str] = None

    def _move(self, target: JobStatus) -> None:
        if target not in _ALLOWED[self.status]:
            raise InvalidTransitionError(
                f"Job {self.id} cannot move from {self.status.value} to {target.value}"
            )
        self.status = target

    def start(self) -> None:
        self._move(JobStatus.PROCESSING)
        self.progress = 0

    def update_progress(self, progress: int) -> None:
        if self.status is not JobStatus.PROCESSING:
            return
        self.progress = max(self.progress, min(100, int(progress)))

    def complete(self) -> None:
        self._move(JobStatus.COMPLETED)
        self.progress = 100

    def fail(self, error: BaseException | str) -> None:
        self._move(JobStatus.ERROR)
        self.progress = 0
        self.error = str(error)

    @property
    def done(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.ERROR)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "status": self.status.value,
            "progress": self.progress,
            "error": self.error,
        }
