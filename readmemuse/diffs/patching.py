import logging
import re

from readmemuse.diffs.models import Hunk, HunkOp

logger = logging.getLogger(__name__)

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

MANUAL_REVIEW_MARKER = (
    "<!-- ReadmeMuse: Could not automatically apply diff. Please review manually. -->"
)


def _split_patch_lines(diff_patch: str) -> list[str]:
    lines = diff_patch.split("\n")
    # a terminating newline does not open another (blank context) line
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _hunk_is_full(hunk: Hunk) -> bool:
    if not hunk.seeded:
        return True
    return (
        hunk.counted_original >= hunk.original_count
        and hunk.counted_new >= hunk.new_count
    )


def _is_file_header(lines: list[str], index: int) -> bool:
    return (
        lines[index].startswith("--- ")
        and index + 1 < len(lines)
        and lines[index + 1].startswith("+++ ")
    )


def _open_hunk(line: str) -> Hunk:
    match = HUNK_HEADER_RE.match(line)
    if match is None:
        logger.debug("Hunk header without line numbers: %r", line)
        return Hunk(original_start=0, original_count=0, new_start=0, new_count=0, seeded=False)

    old_start, old_count, new_start, new_count = match.groups()
    return Hunk(
        original_start=int(old_start),
        original_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
    )


def parse_hunks(diff_patch: str) -> list[Hunk]:
    """
    Read the hunks of a single-file unified diff.

    Lines before the first ``@@`` header (``---``/``+++`` file headers, prose)
    are skipped. Inside a hunk, ``+`` lines are insertions, ``-`` lines are
    deletions, space-prefixed and blank lines are context. A second
    ``---``/``+++`` header pair after a complete hunk belongs to another file
    and ends the parse.

    Header counts are kept as written; compare them with the body through
    ``Hunk.is_consistent``.
    """

    hunks: list[Hunk] = []
    current: Hunk | None = None
    lines = _split_patch_lines(diff_patch)

    for index, line in enumerate(lines):
        if line.startswith("@@"):
            current = _open_hunk(line)
            hunks.append(current)
            continue

        if current is None:
            continue

        # "-- x" deleted next to "++ y" added looks like a header until the hunk is full
        if _is_file_header(lines, index) and _hunk_is_full(current):
            logger.debug("Patch continues with another file at line %d, stopping", index + 1)
            break

        if line.startswith("\\"):
            # "\ No newline at end of file"
            continue
        if line.startswith("+"):
            current.ops.append((HunkOp.ADD, line[1:]))
        elif line.startswith("-"):
            current.ops.append((HunkOp.DELETE, line[1:]))
        elif line.startswith(" "):
            current.ops.append((HunkOp.CONTEXT, line[1:]))
        elif line.strip() == "":
            current.ops.append((HunkOp.CONTEXT, ""))
        else:
            logger.debug("Ignoring unprefixed line inside hunk: %r", line)

    logger.debug("Parsed %d hunks from patch", len(hunks))
    return hunks


def validate_patch(diff_patch: str) -> list[str]:
    """Describe what is wrong with a patch; an empty list means it is well formed."""

    errors: list[str] = []
    lines = _split_patch_lines(diff_patch or "")

    if not any(line.startswith("--- ") for line in lines):
        errors.append("missing '---' file header")
    if not any(line.startswith("+++ ") for line in lines):
        errors.append("missing '+++' file header")

    hunks = parse_hunks(diff_patch or "")
    if not hunks:
        errors.append("no hunk header found")

    for number, hunk in enumerate(hunks, start=1):
        if not hunk.seeded:
            errors.append(f"hunk {number}: header has no line numbers")
            continue
        if not hunk.is_consistent:
            errors.append(
                f"hunk {number}: header counts -{hunk.original_count} +{hunk.new_count} "
                f"do not match body -{hunk.counted_original} +{hunk.counted_new}"
            )

    if errors:
        logger.debug("Patch validation found %d problems", len(errors))
    return errors


def _replay_hunks(original_lines: list[str], hunks: list[Hunk]) -> list[str]:
    out: list[str] = []
    cursor = 0

    for hunk in hunks:
        if hunk.seeded:
            target = min(max(hunk.original_start - 1, 0), len(original_lines))
            if target > cursor:
                out.extend(original_lines[cursor:target])
            cursor = target

        for op, text in hunk.ops:
            if op is HunkOp.ADD:
                out.append(text)
            elif op is HunkOp.DELETE:
                cursor += 1
            else:
                # context text is taken from the original, not the patch
                if cursor < len(original_lines):
                    out.append(original_lines[cursor])
                else:
                    out.append(text)
                cursor += 1

    if hunks:
        out.extend(original_lines[cursor:])
    return out


def _salvage_lines(patch_lines: list[str]) -> list[str]:
    out: list[str] = []
    for line in patch_lines:
        if line.startswith("+") and not line.startswith("+++"):
            out.append(line[1:])
        elif line.startswith(" "):
            out.append(line[1:])
    return out


def apply_patch(original: str, diff_patch: str) -> str:
    """
    Rebuild file content from ``original`` and a unified diff.

    Args:
        original: Current file content.
        diff_patch: Unified diff text, self-generated or external.

    Returns:
        The patched content. When the hunks yield nothing, every insertion and
        context line of the patch is taken verbatim. When that yields nothing
        too, ``original`` is returned with ``MANUAL_REVIEW_MARKER`` appended.

    Header numbers only seed the read cursor into ``original``; context lines
    are copied from ``original`` rather than from the patch. Never raises for
    malformed patch text.
    """

    original = original or ""
    diff_patch = diff_patch or ""
    original_lines = original.split("\n")

    hunks = parse_hunks(diff_patch)
    new_lines = _replay_hunks(original_lines, hunks)

    if not new_lines:
        logger.debug("No hunk output, salvaging insertion and context lines")
        new_lines = _salvage_lines(_split_patch_lines(diff_patch))

    if not new_lines:
        logger.warning("Could not apply diff patch, returning original content with review marker")
        return f"{original}\n\n{MANUAL_REVIEW_MARKER}\n"

    return "\n".join(new_lines)
