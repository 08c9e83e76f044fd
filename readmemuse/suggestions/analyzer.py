from __future__ import annotations

import asyncio
import logging

from readmemuse.diffs.patching import validate_patch
from readmemuse.diffs.synthesize import synthesize
from readmemuse.llm.client import LLMClient
from readmemuse.llm.errors import LLMError
from readmemuse.suggestions.detection import needs_update
from readmemuse.suggestions.heuristics import build_reasoning, build_summary, propose_edit
from readmemuse.suggestions.models import AnalysisInput, DocumentSnapshot, Suggestion
from readmemuse.suggestions.normalize import normalize
from readmemuse.suggestions.prompts import build_messages

logger = logging.getLogger(__name__)


def heuristic_suggestion(doc: DocumentSnapshot, analysis: AnalysisInput) -> Suggestion | None:
    proposed = propose_edit(doc, analysis.changed_files, analysis.pr_title)
    if proposed is None:
        return None

    original = doc.content.split("\n")
    if proposed == original:
        return None

    return Suggestion(
        file_path=doc.path,
        diff_patch=synthesize(doc.path, original, proposed),
        summary=build_summary(doc),
        reasoning=build_reasoning(analysis.changed_files),
    )


async def generated_suggestion(
    doc: DocumentSnapshot,
    analysis: AnalysisInput,
    client: LLMClient,
) -> Suggestion | None:
    messages = build_messages(
        doc_path=doc.path,
        doc_content=doc.content,
        code_diff=analysis.code_diff,
        pr_title=analysis.pr_title,
        pr_body=analysis.pr_body,
        tone_examples=analysis.tone_examples,
        repository=analysis.repository,
        branch=analysis.branch,
    )

    try:
        response = await client.complete(messages)
    except LLMError as e:
        logger.warning("%s: text generation failed (%s): %s", doc.path, e.error_type.value, e)
        return None

    suggestion = normalize(response.text_content or "", file_path=doc.path)
    if suggestion is None:
        return None

    problems = validate_patch(suggestion.diff_patch)
    if problems:
        logger.info("%s: generated patch has problems: %s", doc.path, "; ".join(problems))
    return suggestion


async def analyze_document(
    doc: DocumentSnapshot,
    analysis: AnalysisInput,
    client: LLMClient | None = None,
) -> Suggestion | None:
    if not needs_update(doc, analysis.changed_files):
        logger.debug("%s does not need an update", doc.path)
        return None

    if client is not None:
        suggestion = await generated_suggestion(doc, analysis, client)
        if suggestion is not None:
            return suggestion
        logger.info("%s: falling back to heuristic suggestion", doc.path)

    return heuristic_suggestion(doc, analysis)


async def generate_suggestions(
    analysis: AnalysisInput,
    client: LLMClient | None = None,
) -> list[Suggestion]:
    """
    Suggest documentation edits for every document of the analysis pass.

    Documents are analyzed concurrently; results keep the order of
    ``analysis.doc_files``.
    """

    results = await asyncio.gather(
        *(analyze_document(doc, analysis, client) for doc in analysis.doc_files)
    )
    suggestions = [suggestion for suggestion in results if suggestion is not None]
    logger.info(
        "Generated %d suggestion(s) for %d document(s)",
        len(suggestions),
        len(analysis.doc_files),
    )
    return suggestions
