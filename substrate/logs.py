"""
Log Reader - Find recent entries without reading the whole file

Reads the tail of a log file in a growing window:
1. Read the last 64 KB and split it into entries
2. Not enough entries? Double the window and try again
3. Give up growing at 1 MB and return what was found

Entries are split on a PSR-3 style "[YYYY-MM-DD HH:MM:SS]" header so
multi-line records (stack traces) stay attached to their header. Logs
without that header are split per non-blank line instead.
"""

import logging
import re
from datetime import date
from pathlib import Path
from typing import Optional, Union

from .exceptions import LogFileNotFoundError

logger = logging.getLogger(__name__)

TIMESTAMP_PATTERN = r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\]"

ENTRY_SPLIT_RE = re.compile(f"(?={TIMESTAMP_PATTERN})")
TIMESTAMP_RE = re.compile(TIMESTAMP_PATTERN)

# PSR-3: "[2024-01-01 00:00:00] channel.ERROR: message" on the header line
PSR3_ERROR_RE = re.compile(f"^{TIMESTAMP_PATTERN}[^\\n]*\\.ERROR:")

ERROR_MARKER_RES = [
    re.compile(r"PHP (Fatal error|Parse error|Warning|Notice|Error)", re.IGNORECASE),
    re.compile(r"Traceback \(most recent call last\):"),
]

# logging.basicConfig() default format, e.g. "ERROR:root:boom"; header line only
LOGGING_ERROR_RE = re.compile(r"^(ERROR|CRITICAL):")

CHUNK_SIZE_START = 64 * 1024
CHUNK_SIZE_MAX = 1024 * 1024


class LogReader:
    """Read the last entries of a log file with an adaptive window."""

    def __init__(
        self,
        chunk_size_start: int = CHUNK_SIZE_START,
        chunk_size_max: int = CHUNK_SIZE_MAX,
    ):
        self.chunk_size_start = chunk_size_start
        self.chunk_size_max = max(chunk_size_max, chunk_size_start)

    def is_error_entry(self, entry: str) -> bool:
        """Check whether an entry looks like an error record."""
        if PSR3_ERROR_RE.match(entry) or LOGGING_ERROR_RE.match(entry):
            return True
        return any(marker.search(entry) for marker in ERROR_MARKER_RES)

    def read_last_entries(self, log_file: Union[str, Path], count: int) -> list[str]:
        """
        Return the last `count` entries, oldest first.

        Fewer are returned when the file (or the 1 MB window) holds fewer.
        Raises LogFileNotFoundError if the file does not exist.
        """
        self._ensure_exists(log_file)
        if count <= 0:
            return []

        chunk_size = self.chunk_size_start

        while True:
            entries, whole_file = self.scan_chunk(log_file, chunk_size)

            if len(entries) >= count or whole_file or chunk_size >= self.chunk_size_max:
                break

            chunk_size = min(chunk_size * 2, self.chunk_size_max)

        return entries[-count:]

    def read_last_error_entry(self, log_file: Union[str, Path]) -> Optional[str]:
        """
        Return the most recent error entry, or None if the window has none.

        Raises LogFileNotFoundError if the file does not exist.
        """
        self._ensure_exists(log_file)
        chunk_size = self.chunk_size_start

        while True:
            entries, whole_file = self.scan_chunk(log_file, chunk_size)

            for entry in reversed(entries):
                if self.is_error_entry(entry):
                    return entry.strip()

            if whole_file or chunk_size >= self.chunk_size_max:
                return None

            chunk_size = min(chunk_size * 2, self.chunk_size_max)

    def scan_chunk(self, log_file: Union[str, Path], chunk_size: int) -> tuple[list[str], bool]:
        """
        Split the last `chunk_size` bytes of the file into entries.

        Also returns whether the window reached the start of the file, in
        which case a bigger window would read nothing new.
        """
        path = Path(log_file)

        try:
            with open(path, "rb") as handle:
                handle.seek(0, 2)
                file_size = handle.tell()
                offset = max(file_size - chunk_size, 0)
                handle.seek(offset)

                # Started mid-line: the first line is a fragment
                if offset > 0:
                    handle.readline()

                content = handle.read().decode("utf-8", errors="replace")
        except FileNotFoundError:
            raise LogFileNotFoundError(path)

        return self.split_entries(content, truncated=offset > 0), offset == 0

    def split_entries(self, content: str, truncated: bool = False) -> list[str]:
        if TIMESTAMP_RE.search(content):
            parts = ENTRY_SPLIT_RE.split(content)
            # Text before the first header belongs to a record cut off by the window
            if truncated and parts and not TIMESTAMP_RE.match(parts[0]):
                parts = parts[1:]
        else:
            parts = content.split("\n")

        return [part.rstrip() for part in parts if part.strip()]

    def _ensure_exists(self, log_file: Union[str, Path]):
        if not Path(log_file).is_file():
            raise LogFileNotFoundError(log_file)


def resolve_log_file(project_root: Path, config, source: str = "auto") -> Path:
    """
    Work out which file a log source refers to.

    "auto" tries <log_dir>/<log_file>, then today's dated variant, then the
    most recently modified *.log in log_dir. Named sources come from
    config.log_sources. Unknown names fall back to "auto".
    """
    project_root = Path(project_root)

    if source != "auto" and source in config.log_sources:
        return project_root / config.log_sources[source]

    log_dir = project_root / config.log_dir
    default = log_dir / config.log_file
    if default.exists():
        return default

    stem = Path(config.log_file).stem
    daily = log_dir / f"{stem}-{date.today().isoformat()}.log"
    if daily.exists():
        return daily

    if log_dir.is_dir():
        candidates = sorted(log_dir.glob("*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
        if candidates:
            logger.debug("Falling back to most recent log file %s", candidates[0])
            return candidates[0]

    return default
