import logging
from collections.abc import Sequence

from readmemuse.suggestions.detection import extract_new_symbols
from readmemuse.suggestions.models import DocumentSnapshot, FileChange

logger = logging.getLogger(__name__)

README_PATH = "README.md"
CHANGELOG_HEADINGS = ("## changes", "## changelog", "## recent updates")
SYMBOL_SECTION_HEADINGS = ("## API", "## Usage", "## Features")
CHANGES_SECTION_OFFSET = 3


def has_changelog_section(content: str) -> bool:
    lowered = content.lower()
    return any(heading in lowered for heading in CHANGELOG_HEADINGS)


def find_section_index(lines: Sequence[str], *headings: str) -> int:
    """Index of the first line equal to one of ``headings``, tried in order; -1 if none."""
    for heading in headings:
        for index, line in enumerate(lines):
            if line.strip().lower() == heading.lower():
                return index
    return -1


def propose_edit(
    doc: DocumentSnapshot,
    changes: Sequence[FileChange],
    pr_title: str,
) -> list[str] | None:
    """
    Heuristic rewrite of a README, used when no text generator answered.

    A README without a changelog-like section gets a "Recent Changes"
    section after its first lines listing the pull request title. A README
    that has one gets a placeholder entry for each new exported symbol under
    its API, Usage or Features heading. Other documents are left alone.
    """

    if doc.path != README_PATH:
        return None

    lines = doc.content.split("\n")

    if not has_changelog_section(doc.content):
        index = min(CHANGES_SECTION_OFFSET, len(lines))
        return [*lines[:index], "", "## Recent Changes", "", f"- {pr_title}", "", *lines[index:]]

    symbols = sorted(extract_new_symbols(changes))
    if not symbols:
        return None

    section = find_section_index(lines, *SYMBOL_SECTION_HEADINGS)
    if section < 0:
        logger.debug("%s has no section to list new symbols under", doc.path)
        return None

    entries = [f"- `{symbol}`: [Add description]" for symbol in symbols]
    return [*lines[:section + 1], "", *entries, "", *lines[section + 1:]]


def build_summary(doc: DocumentSnapshot) -> str:
    return f"Update {doc.path} based on PR changes"


def build_reasoning(changes: Sequence[FileChange]) -> str:
    additions = sum(change.additions for change in changes)
    return (
        f"This PR modifies {len(changes)} file(s) with {additions} addition(s). "
        "Documentation should be updated to reflect these changes and maintain accuracy."
    )
