from readmemuse.diffs.models import Hunk, HunkOp
from readmemuse.diffs.patching import (
    MANUAL_REVIEW_MARKER,
    apply_patch,
    parse_hunks,
    validate_patch,
)
from readmemuse.diffs.synthesize import CONTEXT_LINES, build_hunk, synthesize

__all__ = [
    "Hunk",
    "HunkOp",
    "MANUAL_REVIEW_MARKER",
    "apply_patch",
    "parse_hunks",
    "validate_patch",
    "CONTEXT_LINES",
    "build_hunk",
    "synthesize",
]
