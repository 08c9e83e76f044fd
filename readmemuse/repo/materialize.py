import logging
from collections.abc import Iterable
from pathlib import Path

from readmemuse.diffs.patching import apply_patch
from readmemuse.repo.paths import resolve_safe_path
from readmemuse.suggestions.models import Suggestion

logger = logging.getLogger(__name__)


def apply_suggestion(repo_root: Path, suggestion: Suggestion) -> Path:
    """
    Write the patched version of one suggested file.

    A file that does not exist yet is patched from empty content and
    created.
    """

    if not suggestion.file_path:
        raise ValueError("Suggestion has no file path")

    path = resolve_safe_path(repo_root, suggestion.file_path)

    current = ""
    if path.exists():
        current = path.read_text(encoding="utf-8")
    else:
        logger.info("File %s doesn't exist, will create it", suggestion.file_path)

    updated = apply_patch(current, suggestion.diff_patch)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(updated, encoding="utf-8", newline="\n")
    logger.info("Applied changes to %s", suggestion.file_path)
    return path


def apply_suggestions(repo_root: Path, suggestions: Iterable[Suggestion]) -> list[str]:
    """Apply suggestions in order; later suggestions see earlier results."""
    changed: list[str] = []
    for suggestion in suggestions:
        apply_suggestion(repo_root, suggestion)
        if suggestion.file_path not in changed:
            changed.append(suggestion.file_path)
    return changed
