from __future__ import annotations

from collections.abc import Sequence

from readmemuse.suggestions.models import Suggestion

COMMENT_HEADER = "## 📝 ReadmeMuse: Documentation Suggestions"
DRAFT_PR_HEADER = "## 📝 ReadmeMuse: Automated Documentation Updates"
DRAFT_BRANCH_PREFIX = "readmemuse-sync"


def draft_branch_name(pr_number: int) -> str:
    return f"{DRAFT_BRANCH_PREFIX}-{pr_number}"


def draft_pr_title(pr_number: int) -> str:
    return f"📝 ReadmeMuse: Documentation updates for PR #{pr_number}"


def commit_message(suggestion: Suggestion) -> str:
    return f"docs: {suggestion.summary}"


def render_comment(suggestions: Sequence[Suggestion]) -> str:
    lines: list[str] = []
    lines.append(COMMENT_HEADER)
    lines.append("")
    lines.append(
        "This PR changes code that the documentation describes. "
        "Here are suggested documentation updates:"
    )
    lines.append("")

    for suggestion in suggestions:
        lines.append(f"### {suggestion.file_path}")
        lines.append("")
        lines.append(f"**Summary:** {suggestion.summary}")
        lines.append("")
        lines.append(f"**Reasoning:** {suggestion.reasoning}")
        lines.append("")
        lines.append("<details>")
        lines.append("<summary>Suggested changes</summary>")
        lines.append("")
        lines.append("```diff")
        lines.append(suggestion.diff_patch)
        lines.append("```")
        lines.append("")
        lines.append("</details>")
        lines.append("")

    lines.append("---")
    lines.append("")
    lines.append("*💡 Suggestions by ReadmeMuse. Apply them manually or ask for a draft PR.*")
    return "\n".join(lines)


def render_draft_pr_body(
    pr_number: int,
    pr_title: str,
    suggestions: Sequence[Suggestion],
) -> str:
    lines: list[str] = []
    lines.append(DRAFT_PR_HEADER)
    lines.append("")
    lines.append(
        f"This draft PR contains suggested documentation updates based on changes in PR #{pr_number}."
    )
    lines.append("")
    lines.append("### Original PR")
    lines.append("")
    lines.append(f"**Title:** {pr_title}")
    lines.append(f"**Link:** #{pr_number}")
    lines.append("")
    lines.append("### Suggested Changes")
    lines.append("")

    for suggestion in suggestions:
        lines.append(f"#### {suggestion.file_path}")
        lines.append("")
        lines.append(f"**Summary:** {suggestion.summary}")
        lines.append("")
        lines.append(f"**Reasoning:** {suggestion.reasoning}")
        lines.append("")

    lines.append("---")
    lines.append("")
    lines.append(
        "*💡 This draft PR was automatically created by ReadmeMuse. "
        "Review the changes and merge when ready.*"
    )
    lines.append("")
    lines.append(
        "*You can edit these files directly in this PR or close it if the suggestions are not needed.*"
    )
    return "\n".join(lines)
