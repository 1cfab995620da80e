"""
FormDesk - Expense Form Digitizer

Reads scanned expense-report forms (images or PDFs), recognizes their text with OCR,
extracts the form fields with per-field confidence, and exports a CSV.

Flow: validate uploads → OCR + extraction per file (progress per job) → CSV/JSON export
→ optional spending report and review listing of low-confidence fields.

Usage:
    python src/formdesk.py scans/
    python src/formdesk.py form1.jpg form2.pdf --output output/forms.csv --report --review
    python src/formdesk.py scans/ --workers 4 --lang chi_tra+eng --json output/forms.json
"""

import argparse
import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional

# Add parent directory to path for imports
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), ".")))

from commons.config import load_config
from commons.files import InputFile
from commons.folder import LocalFolderProcessor
from commons.logging_setup import configure_logging
from entity.expense_form import FIELD_LABELS, ProcessResult
from entity.file_job import FileJob, JobStatus

from app.export import CSV_HEADERS, build_csv_rows, default_csv_path, summary_row, write_csv, write_json
from app.pipeline import BatchProcessor, FileProcessor, max_workers_from_config
from app.report import build_report, format_amount
from app.review import review_form

_STATUS_ICONS = {
    JobStatus.QUEUED: "⏳",
    JobStatus.PROCESSING: "🔍",
    JobStatus.COMPLETED: "✓",
    JobStatus.ERROR: "❌",
}


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class AppConfig:
    """CLI options merged with config.yaml defaults."""
    inputs: List[str] = field(default_factory=list)
    output_csv: str = field(default_factory=default_csv_path)
    json_path: Optional[str] = None
    workers: int = field(default_factory=max_workers_from_config)
    lang: Optional[str] = None
    show_report: bool = False
    show_review: bool = False


# =============================================================================
# Main Application
# =============================================================================

class FormDeskApp:
    """Command-line orchestrator over BatchProcessor, export, report and review."""

    def __init__(self, args):
        self.args = args
        self.config = AppConfig(
            inputs=list(args.inputs),
            output_csv=args.output or default_csv_path(),
            json_path=args.json,
            workers=args.workers if args.workers else AppConfig().workers,
            lang=args.lang,
            show_report=args.report,
            show_review=args.review,
        )
        self.folder_processor = LocalFolderProcessor()
        self._last_printed: Dict[str, tuple] = {}

    def collect_files(self) -> List[InputFile]:
        """Expand folders into their accepted files; plain paths are passed through for validation."""
        files: List[InputFile] = []
        for path in self.config.inputs:
            if os.path.isdir(path):
                found = self.folder_processor.list_files(path)
                print(f"📁 {path}: {len(found)} file(s)")
                files.extend(found)
            else:
                files.append(InputFile(path=path))
        return files

    def _processor_factory(self) -> FileProcessor:
        return FileProcessor(lang=self.config.lang)

    def _print_job(self, job: FileJob) -> None:
        # one line per status change and per 10% step
        key = (job.status, job.progress // 10)
        if self._last_printed.get(job.id) == key:
            return
        self._last_printed[job.id] = key
        icon = _STATUS_ICONS.get(job.status, "")
        line = f"  {icon} {job.name} ({job.size}) [{job.status.value}] {job.progress}%"
        if job.error:
            line += f" - {job.error}"
        print(line)

    def print_csv_preview(self, results: List[ProcessResult]) -> None:
        print("\n📊 CSV preview")
        rows = [CSV_HEADERS] + build_csv_rows(results) + [summary_row(results)]
        widths = [max(len(str(r[i])) for r in rows) for i in range(len(CSV_HEADERS))]
        for row in rows:
            print("  " + " | ".join(str(v).ljust(w) for v, w in zip(row, widths)))

    def print_report(self, results: List[ProcessResult]) -> None:
        report = build_report(results)
        print("\n" + "=" * 60)
        print("📈 Expense report")
        print("=" * 60)
        print(f"Total spend:        {format_amount(report.grand_total)}")
        print(f"Claimants:          {report.claimant_count}")
        print(f"Average per person: {format_amount(report.average_per_claimant)}")
        print(f"Highest single:     {format_amount(report.highest_total)}")
        print("\nBy category:")
        for bar in report.category_bars:
            print(f"  {bar.label:<6} {format_amount(bar.amount):>14}  {bar.share:6.1%}")
        print("\nBy claimant:")
        for bar in report.claimant_bars:
            print(f"  {bar.label:<6} {format_amount(bar.amount):>14}  {bar.share:6.1%}")

    def print_review(self, results: List[ProcessResult]) -> None:
        print("\n🔎 Review")
        for result in results:
            review = review_form(result)
            if not review.needs_review:
                print(f"  ✓ {result.file_name}: all fields confident")
                continue
            print(f"  ⚠️ {result.file_name}: {len(review.low_confidence)} field(s) need checking")
            for f in review.low_confidence:
                value = result.data.get(f)
                conf = result.data.confidence[f]
                print(f"     - {FIELD_LABELS[f]}: {value if value is not None else '-'} ({round(conf * 100)}%)")
            for a, b, score in review.overlaps:
                print(f"     - {a.label} / {b.label} look alike ({score:.0f})")

    def run(self) -> int:
        print("\n" + "=" * 60)
        print("🧾 FormDesk - Expense Form Digitizer")
        print("=" * 60)
        print(f"📄 Inputs: {', '.join(self.config.inputs)}")
        print(f"⚙️ Workers: {self.config.workers}")
        print("=" * 60)

        files = self.collect_files()
        batch = BatchProcessor(processor_factory=self._processor_factory, max_workers=self.config.workers)
        print("\nProcessing queue:")
        result = batch.run(files, on_update=self._print_job)

        for err in result.rejected:
            print(f"❌ {err}")
        if not result.jobs:
            print("\nNo files to process.")
            return 2

        done = sum(1 for j in result.jobs if j.status is JobStatus.COMPLETED)
        print(f"\nQueue: {done}/{len(result.jobs)} completed")

        if result.results:
            self.print_csv_preview(result.results)
            csv_path = write_csv(result.results, self.config.output_csv)
            print(f"\n💾 CSV saved to: {csv_path}")
            if self.config.json_path:
                write_json(result.results, self.config.json_path)
                print(f"💾 JSON saved to: {self.config.json_path}")
            if self.config.show_report:
                self.print_report(result.results)
            if self.config.show_review:
                self.print_review(result.results)

        print("\n" + "=" * 60)
        print("✅ Processing complete!" if result.all_completed and not result.rejected else "⚠️ Finished with errors")
        print("=" * 60)
        return 0 if result.all_completed and not result.rejected else 1


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="FormDesk - digitize scanned expense-report forms into CSV"
    )
    parser.add_argument("inputs", nargs="+", help="Image/PDF files or folders containing them")
    parser.add_argument("--output", "-o", default=None, help="CSV output path (default from config export.*)")
    parser.add_argument("--json", default=None, help="Also write full records (with confidence) to this JSON file")
    parser.add_argument("--workers", type=int, default=None, help="Files processed concurrently (default: config pipeline.max_workers)")
    parser.add_argument("--lang", default=None, help="OCR language hint (default: config ocr.tesseract.lang)")
    parser.add_argument("--report", action="store_true", help="Print the spending report")
    parser.add_argument("--review", action="store_true", help="List low-confidence fields per file")
    parser.add_argument("--config", default=None, help="Alternative config.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.config:
        load_config(args.config, reload=True)
    configure_logging("DEBUG" if args.verbose else None)
    return FormDeskApp(args).run()


if __name__ == "__main__":
    sys.exit(main())
