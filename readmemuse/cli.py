import asyncio
import json
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from readmemuse.diffs.patching import apply_patch, validate_patch
from readmemuse.llm.config import API_KEY_ENV, LLMConfig
from readmemuse.llm.openrouter import OpenRouterClient
from readmemuse.logging import LOGGER_NAME, setup_logging
from readmemuse.repo.config import CONFIG_FILENAME, load_config, write_config_template
from readmemuse.repo.materialize import apply_suggestions
from readmemuse.repo.paths import find_documentation_files, should_analyze
from readmemuse.suggestions.analyzer import generate_suggestions
from readmemuse.suggestions.models import AnalysisInput, FileChange
from readmemuse.suggestions.records import new_pass_id, read_suggestions, write_suggestions
from readmemuse.suggestions.render import (
    commit_message,
    draft_branch_name,
    draft_pr_title,
    render_comment,
    render_draft_pr_body,
)

app = typer.Typer(no_args_is_help=True)

_FILE_CHANGES = TypeAdapter(list[FileChange])


def load_changes(path: Path) -> list[FileChange]:
    """Read changed files from a JSON list (or an object with a ``files`` list)."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"Cannot read changes from {path}: {e}")

    if isinstance(data, dict):
        data = data.get("files", [])

    try:
        return _FILE_CHANGES.validate_python(data)
    except ValidationError as e:
        raise typer.BadParameter(f"Invalid changes file {path}: {e.errors()[:1]}")


@app.command("init")
def init_cmd(repo: Path = typer.Argument(Path("."), help="Repository root")):
    """Create a .readmemuse.yml template in the repository."""
    if write_config_template(repo):
        typer.echo(f"Created {repo / CONFIG_FILENAME}")
    else:
        typer.echo(f"{repo / CONFIG_FILENAME} already exists")


@app.command("suggest")
def suggest_cmd(
    repo: Path = typer.Argument(..., help="Repository root at the base revision"),
    changes: Path = typer.Option(..., "--changes", help="JSON list of changed files"),
    title: str = typer.Option("", "--title", help="Pull request title"),
    body: str = typer.Option("", "--body", help="Pull request description"),
    out: Path | None = typer.Option(None, "--out", help="Append suggestions to this JSONL file"),
    llm: bool = typer.Option(False, "--llm/--no-llm", help="Ask a text generator for suggestions"),
    model: str | None = typer.Option(None, "--model", help="Model name for --llm"),
    pr_number: int | None = typer.Option(
        None, "--pr-number", help="Pull request number, required for draft PR output"
    ),
    repository: str = typer.Option("", "--repository", help="Repository name, e.g. owner/name"),
    branch: str = typer.Option("", "--branch", help="Head branch of the pull request"),
):
    """Suggest documentation updates for a set of changed files."""
    load_dotenv()

    config = load_config(repo)
    changed_files = load_changes(changes)

    if not should_analyze([change.filename for change in changed_files], config.watch_paths):
        typer.echo("No watched files changed, skipping analysis")
        return

    if config.create_draft_pr and pr_number is None:
        raise typer.BadParameter("required when createDraftPR is enabled", param_hint="--pr-number")

    client = None
    if llm:
        llm_config = LLMConfig.from_env(model)
        if not llm_config.has_api_key:
            raise typer.BadParameter(f"{API_KEY_ENV} is not set", param_hint="--llm")
        client = OpenRouterClient(llm_config)

    analysis = AnalysisInput(
        changed_files=changed_files,
        doc_files=find_documentation_files(repo, config.documentation_files),
        pr_title=title,
        pr_body=body,
        tone_examples=config.tone_examples,
        repository=repository,
        branch=branch,
    )
    suggestions = asyncio.run(generate_suggestions(analysis, client))

    if not suggestions:
        typer.echo("No documentation suggestions")
        return

    if out is not None:
        pass_id = new_pass_id()
        written = write_suggestions(out, suggestions, pass_id=pass_id)
        typer.echo(f"Wrote {written} suggestion(s) to {out} (pass {pass_id})", err=True)

    if config.create_draft_pr:
        typer.echo(f"Branch: {draft_branch_name(pr_number)}")
        typer.echo(f"Title: {draft_pr_title(pr_number)}")
        typer.echo("")
        typer.echo(render_draft_pr_body(pr_number, title, suggestions))
    else:
        typer.echo(render_comment(suggestions))


@app.command("apply")
def apply_cmd(
    repo: Path = typer.Argument(..., help="Repository root to write changes into"),
    suggestions_file: Path = typer.Option(..., "--suggestions", help="JSONL file written by suggest"),
    pass_id: str | None = typer.Option(None, "--pass", help="Only apply this analysis pass"),
):
    """Apply stored suggestions to the files of a repository."""
    if not suggestions_file.exists():
        raise typer.BadParameter(f"{suggestions_file} does not exist", param_hint="--suggestions")

    suggestions = read_suggestions(suggestions_file, pass_id=pass_id)
    if not suggestions:
        typer.echo("No suggestions to apply")
        return

    for path in apply_suggestions(repo, suggestions):
        typer.echo(f"Updated {path}")
    for suggestion in suggestions:
        typer.echo(commit_message(suggestion))


@app.command("patch")
def patch_cmd(
    original: Path = typer.Argument(..., help="File to patch (may not exist yet)"),
    patch_file: Path = typer.Argument(..., help="Unified diff to apply"),
    check: bool = typer.Option(False, "--check", help="Report patch problems on stderr"),
):
    """Print the result of applying a unified diff to a file."""
    content = original.read_text(encoding="utf-8") if original.exists() else ""
    diff_patch = patch_file.read_text(encoding="utf-8")

    if check:
        for problem in validate_patch(diff_patch):
            typer.echo(f"warning: {problem}", err=True)

    typer.echo(apply_patch(content, diff_patch), nl=False)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """
    ReadmeMuse CLI
    """
    if not logging.getLogger(LOGGER_NAME).handlers:
        setup_logging()
    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.INFO)
