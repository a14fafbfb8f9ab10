from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display service with tqdm (TTY only).

The progress display shows:
- Row progress: rows evaluated / rows in the current sheet
- Sheet-level indicators printed as each sheet starts and finishes

In non-TTY environments (CI, pipes) nothing is drawn, to avoid ANSI control
sequence spam in captured output.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
    "SheetProgressIndicator",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """Row progress bar for one sheet."""

    def __init__(self, total_rows: int, *, description: str = "Evaluating rows", enabled: bool = True) -> None:
        """Initialize progress tracker.

        Args:
            total_rows: Number of rows that will be evaluated
            description: Description for the progress bar
            enabled: Allow display at all (still requires a TTY)
        """
        self.total_rows = total_rows
        self.description = description
        self.current_row = 0

        self.enabled = enabled and is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, rows: int = 1) -> None:
        """Record `rows` more evaluated rows."""
        self.current_row += rows
        if self.enabled and self.pbar is not None:
            self.pbar.update(rows)

    def set_postfix(self, **kwargs: Any) -> None:
        """Set postfix information (stats) on the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class SheetProgressIndicator:
    """Simple sheet progress indicator within one workbook.

    Sheet start/finish is printed on one line without a bar; the row bar of
    ProgressTracker covers the long-running part.
    """

    def __init__(self, workbook_name: str, total_sheets: int, *, enabled: bool = True) -> None:
        self.workbook_name = workbook_name
        self.total_sheets = total_sheets
        self.current_sheet = 0
        self.enabled = enabled and is_tty_enabled()

    def start_sheet(self, sheet_name: str) -> None:
        self.current_sheet += 1

        if self.enabled:
            progress_str = f"  Sheet {self.current_sheet}/{self.total_sheets}: {sheet_name}"
            print(progress_str, end="", flush=True)

    def finish_sheet(self, success: bool = True, rows_evaluated: int = 0) -> None:
        """Finish a sheet.

        Args:
            success: Whether the sheet produced no messages
            rows_evaluated: Number of rows evaluated
        """
        if self.enabled:
            status = "✓" if success else "✗"
            if rows_evaluated > 0:
                print(f" - {rows_evaluated} rows {status}")
            else:
                print(f" {status}")
