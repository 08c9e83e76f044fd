import logging
import re
from collections.abc import Iterable

from readmemuse.suggestions.models import DocumentSnapshot, FileChange

logger = logging.getLogger(__name__)

DECLARATION_MARKERS = (
    "export function",
    "export class",
    "export const",
    "export interface",
    "export type",
    "// new:",
    "# new:",
)

_MARKER_ALTERNATION = "|".join(re.escape(marker) for marker in DECLARATION_MARKERS)
_ADDED_DECLARATION_RE = re.compile(rf"^\+\s*({_MARKER_ALTERNATION})(.*)$", re.IGNORECASE)
_REMOVED_DECLARATION_RE = re.compile(rf"^-\s*({_MARKER_ALTERNATION})(.*)$", re.IGNORECASE)
_DECLARED_NAME_RE = re.compile(r"\s*([\w$]+)")

_EXPORTED_SYMBOL_RE = re.compile(
    r"^\+(?!\+\+ ).*?export\s+(?:function|class|const|interface|type)\s+(\w+)"
)


def _declaration_key(marker: str, rest: str) -> tuple[str, str]:
    match = _DECLARED_NAME_RE.match(rest)
    name = match.group(1) if match else rest.strip()
    return marker.lower(), name.lower()


def _declarations(patch: str, pattern: re.Pattern[str]) -> set[tuple[str, str]]:
    keys: set[tuple[str, str]] = set()
    for line in patch.splitlines():
        match = pattern.match(line)
        if match:
            keys.add(_declaration_key(match.group(1), match.group(2)))
    return keys


def adds_declaration(change: FileChange) -> bool:
    """
    True when the patch adds a declaration marker line that it does not
    also remove.

    A removed-and-re-added declaration (a changed signature, a body edit on
    the same line) is a modification and does not count.
    """
    added = _declarations(change.patch, _ADDED_DECLARATION_RE)
    if not added:
        return False
    removed = _declarations(change.patch, _REMOVED_DECLARATION_RE)
    return bool(added - removed)


def _base_name(filename: str) -> str:
    return filename.rsplit("/", 1)[-1]


def mentions_changed_file(doc: DocumentSnapshot, changes: Iterable[FileChange]) -> bool:
    content = doc.content.lower()
    for change in changes:
        base_name = _base_name(change.filename).lower()
        if base_name and base_name in content:
            return True
    return False


def needs_update(doc: DocumentSnapshot, changes: Iterable[FileChange]) -> bool:
    changes = list(changes)

    if any(adds_declaration(change) for change in changes):
        logger.debug("%s: changed files add new declarations", doc.path)
        return True

    if mentions_changed_file(doc, changes):
        logger.debug("%s: document mentions a changed file", doc.path)
        return True

    return False


def extract_new_symbols(changes: Iterable[FileChange]) -> set[str]:
    """Names of exported declarations introduced on added lines."""

    symbols: set[str] = set()
    for change in changes:
        for line in change.patch.splitlines():
            match = _EXPORTED_SYMBOL_RE.match(line)
            if match:
                symbols.add(match.group(1))
    return symbols
