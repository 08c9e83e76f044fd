import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

import ulid
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from readmemuse.suggestions.models import Suggestion
from readmemuse.util.jsonl import append_jsonl, read_jsonl

logger = logging.getLogger(__name__)


class SuggestionRecord(BaseModel):
    """One line of a suggestions file handed to the commit step."""

    model_config = ConfigDict(populate_by_name=True)

    pass_id: str = Field(alias="passId")
    created_at: datetime = Field(alias="createdAt")
    suggestion: Suggestion


def new_pass_id() -> str:
    return str(ulid.ULID())


def write_suggestions(
    path: Path,
    suggestions: Iterable[Suggestion],
    pass_id: str | None = None,
) -> int:
    """Append suggestions to a JSONL file; returns how many were written."""

    pass_id = pass_id or new_pass_id()
    created_at = datetime.now(timezone.utc)
    written = 0
    for suggestion in suggestions:
        record = SuggestionRecord(pass_id=pass_id, created_at=created_at, suggestion=suggestion)
        if append_jsonl(path, record.model_dump_json(by_alias=True)):
            written += 1

    logger.debug("Wrote %d suggestion(s) for pass %s to %s", written, pass_id, path)
    return written


def read_suggestions(path: Path, pass_id: str | None = None) -> list[Suggestion]:
    """Suggestions stored in ``path``, optionally only those of one analysis pass."""

    suggestions: list[Suggestion] = []
    for raw in read_jsonl(path):
        try:
            record = SuggestionRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning("Skipping invalid suggestion record in %s: %s", path, e.errors()[:1])
            continue
        if pass_id is None or record.pass_id == pass_id:
            suggestions.append(record.suggestion)
    return suggestions
