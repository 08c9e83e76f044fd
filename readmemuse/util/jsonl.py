import json
import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from filelock import FileLock

logger = logging.getLogger(__name__)


def append_jsonl(path: Path, record: dict[str, Any] | str) -> bool:
    """
    Append a record to a JSONL file (dict or JSON string).

    Concurrent writers are serialized with a lock file beside ``path``.

    Returns:
        True if write succeeded, False if write failed (e.g., disk full).
    """

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        lock = FileLock(str(path) + ".lock")

        with lock:
            if isinstance(record, str):
                json_line = record if record.endswith("\n") else record + "\n"
            else:
                json_line = json.dumps(record, ensure_ascii=False) + "\n"
            with open(path, "ab") as f:
                f.write(json_line.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())

        return True

    except OSError as e:
        print(f"CRITICAL: Failed to write to {path}: {e}", file=sys.stderr)
        logger.critical("Failed to write JSONL record to %s: %s", path, e)

        return False


def read_jsonl(path: Path) -> Iterator[dict]:
    """Yield one parsed object per line; blank and malformed lines are skipped with a warning."""

    with Path(path).open("r", encoding="utf-8") as f:
        for number, line in enumerate(f, start=1):
            line = line.strip()

            if line == "":
                continue

            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("Line %d of %s could not be read: %s", number, path, e)
                continue

            if not isinstance(record, dict):
                logger.warning("Line %d of %s is not a JSON object", number, path)
                continue

            yield record
