from readmemuse.suggestions.analyzer import (
    analyze_document,
    generate_suggestions,
    heuristic_suggestion,
)
from readmemuse.suggestions.detection import (
    DECLARATION_MARKERS,
    extract_new_symbols,
    needs_update,
)
from readmemuse.suggestions.models import (
    AnalysisInput,
    DocumentSnapshot,
    FileChange,
    Suggestion,
)
from readmemuse.suggestions.normalize import normalize, parse_response
from readmemuse.suggestions.render import (
    draft_branch_name,
    render_comment,
    render_draft_pr_body,
)

__all__ = [
    "analyze_document",
    "generate_suggestions",
    "heuristic_suggestion",
    "DECLARATION_MARKERS",
    "extract_new_symbols",
    "needs_update",
    "AnalysisInput",
    "DocumentSnapshot",
    "FileChange",
    "Suggestion",
    "normalize",
    "parse_response",
    "draft_branch_name",
    "render_comment",
    "render_draft_pr_body",
]
