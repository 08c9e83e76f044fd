import json
import logging
from collections.abc import Mapping
from typing import Any

from readmemuse.suggestions.models import Suggestion

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("summary", "reasoning", "diffPatch")

_FIELD_ALIASES = {
    "summary": ("summary",),
    "reasoning": ("reasoning",),
    "diffPatch": ("diffPatch", "diff_patch"),
    "filePath": ("filePath", "file_path"),
}


def parse_response(text: str) -> dict[str, Any] | None:
    """
    Decode the JSON object in a text-generation response.

    Markdown code fences around the object are dropped, and text before the
    first ``{`` or after the object is ignored.
    """

    lines = [line for line in text.splitlines() if not line.strip().startswith("```")]
    body = "\n".join(lines)
    start = body.find("{")
    if start < 0:
        return None

    try:
        value, _ = json.JSONDecoder().raw_decode(body[start:])
    except json.JSONDecodeError as e:
        logger.debug("Response is not valid JSON: %s", e)
        return None

    if not isinstance(value, dict):
        return None
    return value


def _field(raw: Mapping[str, Any], name: str) -> str | None:
    for key in _FIELD_ALIASES[name]:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _path_from_patch(diff_patch: str) -> str | None:
    for line in diff_patch.splitlines():
        if line.startswith("+++ "):
            path = line[4:].split("\t", 1)[0].strip()
            if path and path != "/dev/null":
                return path.removeprefix("b/")
    return None


def normalize(
    raw: Mapping[str, Any] | str | None,
    file_path: str | None = None,
) -> Suggestion | None:
    """
    Turn an external summary/reasoning/patch triple into a ``Suggestion``.

    ``raw`` is either the decoded object or the response text. Returns
    ``None`` when the object cannot be decoded or one of ``summary``,
    ``reasoning`` and ``diffPatch`` is missing, not a string, or blank.
    The patch itself is not checked; ``apply_patch`` copes with malformed
    diffs.

    The file path is ``file_path`` when given, then the response's
    ``filePath``, then the ``+++`` header of the patch.
    """

    if isinstance(raw, str):
        raw = parse_response(raw)
    if not isinstance(raw, Mapping):
        logger.info("Rejected suggestion: response is not a JSON object")
        return None

    values = {name: _field(raw, name) for name in REQUIRED_FIELDS}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        logger.info("Rejected suggestion: missing %s", ", ".join(missing))
        return None

    diff_patch = values["diffPatch"]
    path = file_path or _field(raw, "filePath") or _path_from_patch(diff_patch) or ""

    return Suggestion(
        file_path=path,
        diff_patch=diff_patch,
        summary=values["summary"],
        reasoning=values["reasoning"],
    )
