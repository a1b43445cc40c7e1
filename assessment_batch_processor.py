"""
Assessment Batch Processor for assessing many users at once.
Handles JSON files and ZIP archives with per-file error collection.
"""

import json
import logging
import zipfile
import io
import os
from typing import Dict, List, Optional, Tuple, Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
import traceback

from assessment_engine import run_assessment
from assessment_engine.errors import UnrecognizedFrequency

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


RECORD_KEYS = ("incomes", "expenses", "loans", "profile", "conditions", "medical_expenses", "policies")


class InvalidJsonStructureError(Exception):
    """Raised when JSON structure cannot be normalized to a user record set."""
    pass


@dataclass
class ProcessingError:
    """Details of a processing error."""
    file_name: str
    error_type: str
    error_message: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class AssessmentResult:
    """Assessment output for one file."""
    user_ref: str
    assessment: Dict


@dataclass
class BatchStats:
    """Statistics for batch processing."""
    total_files: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0

    # Financial health tier counts
    excellent: int = 0
    good: int = 0
    fair: int = 0
    poor: int = 0

    with_health_profile: int = 0

    # Affordability statistics
    total_affordable: float = 0.0
    min_affordable: float = float("inf")
    max_affordable: float = 0.0

    # Timing
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def average_affordable(self) -> float:
        """Calculate average maximum affordable amount."""
        if self.successful == 0:
            return 0.0
        return self.total_affordable / self.successful

    @property
    def processing_time(self) -> float:
        """Calculate total processing time in seconds."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.total_files == 0:
            return 0.0
        return (self.successful / self.total_files) * 100


@dataclass
class BatchResult:
    """Complete result of batch processing."""
    stats: BatchStats
    results: List[AssessmentResult]
    errors: List[ProcessingError]
    error_summary: Dict[str, int] = field(default_factory=dict)

    @staticmethod
    def merge_results(result1: 'BatchResult', result2: 'BatchResult') -> 'BatchResult':
        """
        Merge two BatchResult objects into a single combined result.

        Args:
            result1: First batch result (typically the existing cumulative result)
            result2: Second batch result (typically the new batch to add)

        Returns:
            New BatchResult with merged data
        """
        s1, s2 = result1.stats, result2.stats
        merged_stats = BatchStats(
            total_files=s1.total_files + s2.total_files,
            processed=s1.processed + s2.processed,
            successful=s1.successful + s2.successful,
            failed=s1.failed + s2.failed,
            excellent=s1.excellent + s2.excellent,
            good=s1.good + s2.good,
            fair=s1.fair + s2.fair,
            poor=s1.poor + s2.poor,
            with_health_profile=s1.with_health_profile + s2.with_health_profile,
            total_affordable=s1.total_affordable + s2.total_affordable,
        )

        successful = [s for s in (s1, s2) if s.successful > 0]
        if successful:
            merged_stats.min_affordable = min(s.min_affordable for s in successful)
            merged_stats.max_affordable = max(s.max_affordable for s in successful)
        else:
            merged_stats.min_affordable = 0.0
            merged_stats.max_affordable = 0.0

        start_times = [s.start_time for s in (s1, s2) if s.start_time]
        end_times = [s.end_time for s in (s1, s2) if s.end_time]
        merged_stats.start_time = min(start_times) if start_times else None
        merged_stats.end_time = max(end_times) if end_times else None

        merged_error_summary = dict(result1.error_summary)
        for error_type, count in result2.error_summary.items():
            merged_error_summary[error_type] = merged_error_summary.get(error_type, 0) + count

        return BatchResult(
            stats=merged_stats,
            results=result1.results + result2.results,
            errors=result1.errors + result2.errors,
            error_summary=merged_error_summary
        )


class AssessmentBatchProcessor:
    """Batch processor for user assessments."""

    def __init__(self, as_of: Optional[date] = None):
        """
        Initialize the batch processor.

        Args:
            as_of: Reference date for policy dates and trailing windows
                   (defaults to today at assessment time)
        """
        self.as_of = as_of
        logger.info(f"Initialized batch processor: as_of={as_of or 'today'}")

    def process_batch(
        self,
        files: List[Tuple[str, bytes]],
        progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> BatchResult:
        """
        Process a batch of user record files.

        Args:
            files: List of (filename, content) tuples
            progress_callback: Optional callback(current, total, message)

        Returns:
            BatchResult with all processing results
        """
        stats = BatchStats(
            total_files=len(files),
            start_time=datetime.now()
        )

        results = []
        errors = []
        error_types = {}

        logger.info(f"Starting batch processing of {len(files)} files")

        for idx, (filename, content) in enumerate(files):
            error_type = None
            message = ""
            try:
                if progress_callback:
                    progress_callback(idx + 1, len(files), f"Processing: {filename}")

                logger.debug(f"Processing file {idx + 1}/{len(files)}: {filename}")

                result = self._process_single_file(filename, content)

                results.append(result)
                stats.processed += 1
                stats.successful += 1
                self._update_stats(stats, result)

            except json.JSONDecodeError as e:
                error_type, message = "JSON_PARSE_ERROR", f"Invalid JSON: {str(e)}"
                logger.error(f"JSON parse error in {filename}: {e}")

            except KeyError as e:
                error_type, message = "MISSING_DATA", f"Missing required field: {str(e)}"
                logger.error(f"Missing data in {filename}: {e}")

            except UnrecognizedFrequency as e:
                error_type, message = "UNRECOGNIZED_FREQUENCY", str(e)
                logger.error(f"Unrecognized frequency in {filename}: {e}")

            except ValueError as e:
                error_type, message = "DATA_VALIDATION_ERROR", str(e)
                logger.error(f"Data validation error in {filename}: {e}")

            except InvalidJsonStructureError as e:
                error_type, message = "INVALID_JSON_STRUCTURE", str(e)
                logger.error(f"Invalid JSON structure in {filename}: {e}")

            except Exception as e:
                error_type, message = "PROCESSING_ERROR", f"{type(e).__name__}: {str(e)}"
                logger.error(f"Processing error in {filename}: {traceback.format_exc()}")

            if error_type:
                errors.append(ProcessingError(
                    file_name=filename,
                    error_type=error_type,
                    error_message=message
                ))
                stats.failed += 1
                stats.processed += 1
                error_types[error_type] = error_types.get(error_type, 0) + 1

        stats.end_time = datetime.now()

        if stats.successful == 0:
            stats.min_affordable = 0.0

        logger.info(
            f"Batch processing complete: {stats.successful}/{stats.total_files} successful, "
            f"avg affordable: {stats.average_affordable:.2f}, time: {stats.processing_time:.1f}s"
        )

        return BatchResult(
            stats=stats,
            results=results,
            errors=errors,
            error_summary=error_types
        )

    def _update_stats(self, stats: BatchStats, result: AssessmentResult) -> None:
        assessment = result.assessment
        affordable = assessment["max_affordable_amount"]
        stats.total_affordable += affordable
        stats.min_affordable = min(stats.min_affordable, affordable)
        stats.max_affordable = max(stats.max_affordable, affordable)

        tier = assessment["finance_summary"]["financial_health"].lower()
        setattr(stats, tier, getattr(stats, tier) + 1)

        if assessment["health_summary"] is not None:
            stats.with_health_profile += 1

    def _process_single_file(self, filename: str, content: bytes) -> AssessmentResult:
        """Process a single user record file."""
        # Parse JSON with fallback encoding handling
        try:
            data = json.loads(content.decode("utf-8"))
        except UnicodeDecodeError:
            try:
                data = json.loads(content.decode("cp1252"))
            except UnicodeDecodeError:
                data = json.loads(content.decode("latin-1"))

        records = self._normalize_json_structure(data, filename)

        assessment = run_assessment(records, as_of=self.as_of)
        user_ref = str(records.get("user_id") or Path(filename).stem)

        return AssessmentResult(user_ref=user_ref, assessment=assessment)

    def _normalize_json_structure(self, data, filename: str) -> Dict:
        """
        Normalize a JSON payload to a record dictionary.

        Handles:
        - Dictionary with record keys at the root
        - Dictionary with the records nested under 'records'

        Raises:
            InvalidJsonStructureError: If structure cannot be normalized
        """
        if not isinstance(data, dict):
            raise InvalidJsonStructureError(
                f"Unexpected JSON root type in {filename}: {type(data).__name__}. "
                f"Expected an object with user records."
            )

        if isinstance(data.get("records"), dict):
            records = dict(data["records"])
            records.setdefault("user_id", data.get("user_id"))
            logger.debug(f"{filename}: records found under 'records' key")
        else:
            records = data

        if not any(key in records for key in RECORD_KEYS):
            raise InvalidJsonStructureError(
                f"No user records found in {filename}. "
                f"Expected any of: {', '.join(RECORD_KEYS)}"
            )

        return records

    def load_files_from_paths(self, paths: List[str]) -> List[Tuple[str, bytes]]:
        """
        Load files from disk. Handles JSON files, ZIP archives and directories.

        Args:
            paths: File or directory paths

        Returns:
            List of (filename, content) tuples
        """
        all_files = []

        for path_str in paths:
            path = Path(path_str)
            if path.is_dir():
                candidates = sorted(p for p in path.iterdir() if p.is_file())
            else:
                candidates = [path]

            for candidate in candidates:
                filename = candidate.name
                if filename.lower().endswith(".zip"):
                    logger.info(f"Extracting ZIP archive: {filename}")
                    zip_files = self._extract_zip(candidate.read_bytes())
                    all_files.extend(zip_files)
                    logger.info(f"Extracted {len(zip_files)} files from {filename}")
                elif filename.lower().endswith(".json"):
                    all_files.append((filename, candidate.read_bytes()))
                else:
                    logger.warning(f"Skipping unsupported file: {filename}")

        logger.info(f"Total files loaded: {len(all_files)}")
        return all_files

    def _extract_zip(self, content: bytes) -> List[Tuple[str, bytes]]:
        """Extract JSON files from a ZIP archive."""
        files = []

        with zipfile.ZipFile(io.BytesIO(content), "r") as zf:
            for name in zf.namelist():
                if name.endswith("/"):
                    continue
                if not name.lower().endswith(".json"):
                    continue
                files.append((os.path.basename(name), zf.read(name)))

        return files

    def results_to_dataframe(self, results: List[AssessmentResult]):
        """
        Convert assessment results to a pandas DataFrame.

        Args:
            results: List of AssessmentResult objects

        Returns:
            pandas DataFrame
        """
        import pandas as pd

        rows = []
        for result in results:
            finance = result.assessment["finance_summary"]
            health = result.assessment["health_summary"] or {}

            rows.append({
                "User Ref": result.user_ref,
                "Financial Health": finance["financial_health"],
                "Monthly Income": round(finance["monthly_income"], 2),
                "Monthly Expenses": round(finance["monthly_expenses"], 2),
                "Monthly Loan Payments": round(finance["monthly_loan_payments"], 2),
                "Disposable Income": round(finance["disposable_income"], 2),
                "Debt To Income": finance["debt_to_income_ratio"],
                "Savings Rate": finance["savings_rate"],
                "Budget Status": result.assessment["budget_status"],
                "Health Risk Score": health.get("health_risk_score"),
                "Health Risk Level": health.get("health_risk_level"),
                "Total Health Costs": health.get("total_health_costs"),
                "Coverage Gap Risk": health.get("coverage_gap_risk"),
                "Financial Vulnerability": health.get("financial_vulnerability"),
                "Priority Adjustment": result.assessment["priority_adjustment"],
                "Max Affordable Amount": round(result.assessment["max_affordable_amount"], 2),
                "Coverage Gaps": "; ".join(g["type"] for g in result.assessment["coverage_gaps"]),
            })

        return pd.DataFrame(rows)

    def errors_to_dataframe(self, errors: List[ProcessingError]):
        """
        Convert processing errors to a pandas DataFrame.

        Args:
            errors: List of ProcessingError objects

        Returns:
            pandas DataFrame
        """
        import pandas as pd

        rows = []
        for error in errors:
            rows.append({
                "File Name": error.file_name,
                "Error Type": error.error_type,
                "Error Message": error.error_message,
                "Timestamp": error.timestamp,
            })

        return pd.DataFrame(rows)


def main(paths: List[str], output_csv: str = "assessments.csv"):
    processor = AssessmentBatchProcessor()
    batch = processor.process_batch(processor.load_files_from_paths(paths))

    processor.results_to_dataframe(batch.results).to_csv(output_csv, index=False)
    if batch.errors:
        errors_csv = str(Path(output_csv).with_name(Path(output_csv).stem + "_errors.csv"))
        processor.errors_to_dataframe(batch.errors).to_csv(errors_csv, index=False)
        print(f"WARNING: {len(batch.errors)} files failed, see {errors_csv}")

    print(f"Assessed {batch.stats.successful}/{batch.stats.total_files} files -> {output_csv}")


USAGE = "Usage: python assessment_batch_processor.py <file-or-dir>... [--out results.csv]"


def parse_args(argv: List[str]) -> Tuple[List[str], str]:
    """Split command line arguments into input paths and the output CSV path."""
    args = list(argv)
    out = "assessments.csv"
    if "--out" in args:
        i = args.index("--out")
        if i + 1 >= len(args):
            raise SystemExit(USAGE)
        out = args[i + 1]
        args = args[:i] + args[i + 2:]
    if not args:
        raise SystemExit(USAGE)
    return args, out


if __name__ == "__main__":
    import sys
    paths, out = parse_args(sys.argv[1:])
    main(paths, out)
