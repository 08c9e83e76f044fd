import logging
from collections.abc import Sequence

from readmemuse.diffs.models import Hunk, HunkOp

logger = logging.getLogger(__name__)

CONTEXT_LINES = 3


def _first_divergence(original: Sequence[str], proposed: Sequence[str]) -> int:
    limit = min(len(original), len(proposed))
    for index in range(limit):
        if original[index] != proposed[index]:
            return index
    return limit


def _common_suffix(original: Sequence[str], proposed: Sequence[str], prefix: int) -> int:
    # the suffix may not reach back into the shared prefix
    limit = min(len(original), len(proposed)) - prefix
    length = 0
    while length < limit and original[-1 - length] == proposed[-1 - length]:
        length += 1
    return length


def _as_lines(lines: Sequence[str]) -> list[str]:
    # empty text splits into one empty line
    return list(lines) or [""]


def build_hunk(
    original: Sequence[str],
    proposed: Sequence[str],
    context: int = CONTEXT_LINES,
) -> Hunk:
    """
    Build the single hunk turning ``original`` into ``proposed``.

    The changed region starts at the first differing line and stops before
    the longest shared tail. Lines of the region are compared pairwise:
    equal pairs stay context, differing pairs become a deletion followed by
    an insertion, and the longer side finishes with deletions or insertions
    only. Up to ``context`` unchanged lines surround the region.
    """

    original = _as_lines(original)
    proposed = _as_lines(proposed)
    divergence = _first_divergence(original, proposed)
    suffix = _common_suffix(original, proposed, divergence)
    original_end = len(original) - suffix
    proposed_end = len(proposed) - suffix
    start = max(0, divergence - context)

    ops: list[tuple[HunkOp, str]] = []
    for line in original[start:divergence]:
        ops.append((HunkOp.CONTEXT, line))

    overlap = min(original_end, proposed_end) - divergence
    for offset in range(overlap):
        before = original[divergence + offset]
        after = proposed[divergence + offset]
        if before == after:
            ops.append((HunkOp.CONTEXT, before))
        else:
            ops.append((HunkOp.DELETE, before))
            ops.append((HunkOp.ADD, after))

    for line in original[divergence + overlap:original_end]:
        ops.append((HunkOp.DELETE, line))
    for line in proposed[divergence + overlap:proposed_end]:
        ops.append((HunkOp.ADD, line))

    for line in original[original_end:original_end + context]:
        ops.append((HunkOp.CONTEXT, line))

    hunk = Hunk(original_start=start + 1, original_count=0, new_start=start + 1, new_count=0, ops=ops)
    hunk.original_count = hunk.counted_original
    hunk.new_count = hunk.counted_new
    return hunk


def synthesize(
    path: str,
    original: Sequence[str],
    proposed: Sequence[str],
    context: int = CONTEXT_LINES,
) -> str:
    """
    Render a single-hunk unified diff from ``original`` to ``proposed``.

    Example output for ``README.md``::

        --- a/README.md
        +++ b/README.md
        @@ -1,3 +1,7 @@
         # Proj

        +## Recent Changes
        ...

    Raises:
        ValueError: if the two sequences are identical; there is nothing to
            describe and callers are expected to skip the document.
    """

    if _as_lines(original) == _as_lines(proposed):
        raise ValueError(f"No changes to describe for {path}")

    hunk = build_hunk(original, proposed, context=context)
    lines = [f"--- a/{path}", f"+++ b/{path}", hunk.header(), *hunk.body_lines()]

    logger.debug(
        "Synthesized patch for %s: -%d +%d lines from line %d",
        path,
        hunk.original_count,
        hunk.new_count,
        hunk.original_start,
    )
    return "\n".join(lines)
