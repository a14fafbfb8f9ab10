from __future__ import annotations

from ..models.session_result import SessionResult

"""Summary line rendering service.

SUMMARY sheets={evaluated}/{total} rows={rows} failed_rows={failed}
skipped_rules={skipped} messages={messages} elapsed_sec={elapsed} valid={true|false}
"""


def _format_number(value: float) -> str:
    # integers without decimals, very small numbers without scientific notation
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return str(round(value, 3))


def render_summary_line(result: SessionResult) -> str:
    """Render a SUMMARY line from a SessionResult.

    Examples:
        >>> result = SessionResult(passed=True, messages=[], sheet_stats=[], elapsed_seconds=2.0)
        >>> render_summary_line(result)
        'SUMMARY sheets=0/0 rows=0 failed_rows=0 skipped_rules=0 messages=0 elapsed_sec=2 valid=true'
    """
    return (
        f"SUMMARY sheets={result.evaluated_sheets}/{len(result.sheet_stats)} "
        f"rows={result.total_rows} "
        f"failed_rows={result.failed_rows} "
        f"skipped_rules={result.skipped_rules} "
        f"messages={len(result.messages)} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"valid={'true' if result.passed else 'false'}"
    )
