import hashlib
from collections.abc import Sequence

from readmemuse.llm.messages import InputMessage, MessageRole

SYSTEM_PROMPT_V1 = """You are a technical writer keeping a repository's documentation in sync with its code.

# Your Goal
Decide whether a documentation file should change because of a pull request, and if so propose the edit.

# Constraints
- Only describe changes the pull request actually makes
- Keep the existing structure and voice of the document
- Make minimal, targeted edits

# Answer Format
Reply with a single JSON object and nothing else:
{"summary": "<one line>", "reasoning": "<why the document needs this>", "diffPatch": "<unified diff>"}

The diffPatch must be a unified diff against the documentation file:
```diff
--- a/README.md
+++ b/README.md
@@ -10,6 +10,7 @@
 context line
-old line
+new line
 context line
```
"""

MAX_DIFF_CHARS = 20000


def get_system_prompt() -> str:
    return SYSTEM_PROMPT_V1


def get_system_prompt_version() -> str:
    digest = hashlib.sha256(SYSTEM_PROMPT_V1.encode("utf-8")).hexdigest()[:12]
    return f"system_v1@{digest}"


def _truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    omitted = len(text) - max_chars
    return f"{text[:max_chars]}\n\n... [{omitted} chars truncated] ..."


def build_prompt(
    doc_path: str,
    doc_content: str,
    code_diff: str,
    pr_title: str = "",
    pr_body: str = "",
    tone_examples: Sequence[str] | None = None,
    repository: str = "",
    branch: str = "",
) -> str:
    header = f"# Pull Request\nTitle: {pr_title}"
    if repository:
        header += f"\nRepository: {repository}"
    if branch:
        header += f"\nBranch: {branch}"
    sections = [header]
    if pr_body:
        sections.append(f"Description:\n{pr_body}")

    sections.append(f"# Code Diff\n```diff\n{_truncate(code_diff, MAX_DIFF_CHARS)}\n```")
    sections.append(f"# Documentation File: {doc_path}\n```\n{doc_content}\n```")

    if tone_examples:
        examples = "\n".join(f"- {example}" for example in tone_examples)
        sections.append(f"# Tone Examples\nMatch the writing style of these snippets:\n{examples}")

    sections.append(
        f"Propose an update to {doc_path} as a JSON object with summary, reasoning and diffPatch."
    )
    return "\n\n".join(sections)


def build_messages(
    doc_path: str,
    doc_content: str,
    code_diff: str,
    pr_title: str = "",
    pr_body: str = "",
    tone_examples: Sequence[str] | None = None,
    repository: str = "",
    branch: str = "",
) -> list[InputMessage]:
    return [
        InputMessage(role=MessageRole.SYSTEM, content=get_system_prompt()),
        InputMessage(
            role=MessageRole.USER,
            content=build_prompt(
                doc_path,
                doc_content,
                code_diff,
                pr_title,
                pr_body,
                tone_examples,
                repository,
                branch,
            ),
        ),
    ]
