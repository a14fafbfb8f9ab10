from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from sheetrules.models.validation_message import ValidationMessage

"""Validation message log (JSON Lines).

- One line per ValidationMessage, fixed key set
- One file per run: `logs/messages-YYYYMMDD-HHMMSS.log` (UTC), created on first flush
- Messages are buffered in memory and appended on flush()
"""

__all__ = [
    "MessageLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class MessageLogBuffer:
    """In-memory buffer for validation messages. Flush writes JSON Lines.

    Not thread safe; the session records messages from its own thread only.
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._messages: list[ValidationMessage] = []
        self._logs_dir = logs_dir or LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"messages-{stamp}.log"
        return self._file_path

    def append(self, message: ValidationMessage) -> None:
        self._messages.append(message)

    def extend(self, messages: list[ValidationMessage]) -> None:
        self._messages.extend(messages)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._messages)

    def flush(self) -> Path | None:
        """Append buffered messages to the log file; None when nothing was buffered."""
        if not self._messages:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for m in self._messages:
                f.write(m.to_json_line() + "\n")
        self._messages.clear()
        return fp
