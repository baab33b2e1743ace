from __future__ import annotations

from ..models.validation_result import ValidationResult

"""SUMMARY line rendering for batch validation runs."""


def _format_seconds(value: float) -> str:
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small durations
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ValidationResult) -> str:
    """Render the SUMMARY line for a validation run.

    Format:
    SUMMARY files={total} valid={valid} invalid={invalid} failed={failed}
    rows={rows} errors={errors} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> render_summary_line(ValidationResult([], t, t, 0.0))
        'SUMMARY files=0 valid=0 invalid=0 failed=0 rows=0 errors=0 elapsed_sec=0'
    """
    return (
        f"SUMMARY files={len(result.file_stats)} "
        f"valid={result.valid_files} "
        f"invalid={result.invalid_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"errors={result.total_errors} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
