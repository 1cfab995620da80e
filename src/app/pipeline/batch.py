"""Multi-file runs: validate uploads, track a FileJob per file, run each through its own FileProcessor."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from loguru import logger

from commons.config import config, get_section
from commons.errors import FileValidationError
from commons.files import InputFile, format_file_size, validate_input_file
from entity.expense_form import ProcessResult
from entity.file_job import FileJob, JobStatus
from app.pipeline.file_processor import FileProcessor

JobUpdate = Callable[[FileJob], None]


def max_workers_from_config() -> int:
    """pipeline.max_workers, or 1 when unset or malformed."""
    try:
        return max(1, int(get_section(config, "pipeline").get("max_workers", 1)))
    except (TypeError, ValueError):
        return 1


@dataclass
class BatchResult:
    """Jobs in input order, results for completed jobs (same order), and rejected uploads."""
    jobs: List[FileJob] = field(default_factory=list)
    results: List[ProcessResult] = field(default_factory=list)
    rejected: List[FileValidationError] = field(default_factory=list)
    results_by_job: Dict[str, ProcessResult] = field(default_factory=dict)

    @property
    def all_completed(self) -> bool:
        return bool(self.jobs) and all(j.status is JobStatus.COMPLETED for j in self.jobs)

    @property
    def failed(self) -> List[FileJob]:
        return [j for j in self.jobs if j.status is JobStatus.ERROR]


class BatchProcessor:
    """
    Runs uploads concurrently (max_workers from config pipeline.max_workers).
    A failure marks only that file's job as error; other files keep going.
    processor_factory builds one FileProcessor per file so no engine is shared.
    """

    def __init__(
        self,
        processor_factory: Callable[[], FileProcessor] | None = None,
        max_workers: int | None = None,
    ):
        self.processor_factory = processor_factory or FileProcessor
        self.max_workers = max_workers if max_workers is not None else max_workers_from_config()
        self._lock = threading.Lock()

    def accept(self, files: Iterable[InputFile | str], result: BatchResult) -> List[tuple[FileJob, InputFile]]:
        """Validate uploads; rejected files get no job."""
        accepted = []
        for f in files:
            input_file = InputFile(path=f) if isinstance(f, str) else f
            try:
                validate_input_file(input_file)
            except FileValidationError as e:
                logger.warning("Rejected {}: {}", input_file.name, e)
                result.rejected.append(e)
                continue
            job = FileJob(name=input_file.name, size=format_file_size(input_file.size))
            result.jobs.append(job)
            accepted.append((job, input_file))
        return accepted

    def _notify(self, job: FileJob, on_update: Optional[JobUpdate]) -> None:
        if on_update is None:
            return
        try:
            on_update(job)
        except Exception as e:
            logger.warning("Job update callback failed for {}: {}", job.name, e)

    def _run_one(
        self,
        job: FileJob,
        input_file: InputFile,
        on_update: Optional[JobUpdate],
        cancel_event: Optional[threading.Event],
    ) -> Optional[ProcessResult]:
        with self._lock:
            job.start()
        self._notify(job, on_update)

        def on_progress(progress: int) -> None:
            with self._lock:
                job.update_progress(progress)
            self._notify(job, on_update)

        try:
            result = self.processor_factory().process(input_file, on_progress, cancel_event)
        except Exception as e:
            with self._lock:
                job.fail(e)
            self._notify(job, on_update)
            return None

        with self._lock:
            job.complete()
        self._notify(job, on_update)
        return result

    def run(
        self,
        files: Iterable[InputFile | str],
        on_update: Optional[JobUpdate] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BatchResult:
        result = BatchResult()
        accepted = self.accept(files, result)
        for job, _ in accepted:
            self._notify(job, on_update)
        if not accepted:
            return result

        workers = min(self.max_workers, len(accepted))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._run_one, job, input_file, on_update, cancel_event)
                for job, input_file in accepted
            ]
            outcomes = [f.result() for f in futures]

        for (job, _), outcome in zip(accepted, outcomes):
            if outcome is not None:
                result.results.append(outcome)
                result.results_by_job[job.id] = outcome
        logger.info(
            "Batch done: {} completed, {} failed, {} rejected",
            len(result.results), len(result.failed), len(result.rejected),
        )
        return result
