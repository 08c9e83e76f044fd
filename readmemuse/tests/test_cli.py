import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from readmemuse.cli import app, load_changes
from readmemuse.diffs.patching import MANUAL_REVIEW_MARKER
from readmemuse.llm.config import API_KEY_ENV
from readmemuse.repo.config import CONFIG_FILENAME
from readmemuse.suggestions.models import Suggestion
from readmemuse.suggestions.records import read_suggestions, write_suggestions

runner = CliRunner()

EXPORT_CHANGE = {
    "filename": "src/api.ts",
    "patch": "@@ -0,0 +1 @@\n+export function foo() {}",
    "additions": 1,
}


def make_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / "README.md").write_text("# Proj\n\nBody", encoding="utf-8")
    return repo


def write_changes(tmp_path: Path, changes: object) -> Path:
    path = tmp_path / "changes.json"
    path.write_text(json.dumps(changes), encoding="utf-8")
    return path


class TestLoadChanges:
    def test_list_of_files(self, tmp_path: Path):
        changes = load_changes(write_changes(tmp_path, [EXPORT_CHANGE]))

        assert [c.filename for c in changes] == ["src/api.ts"]
        assert changes[0].additions == 1

    def test_object_with_files(self, tmp_path: Path):
        changes = load_changes(write_changes(tmp_path, {"files": [EXPORT_CHANGE], "number": 7}))

        assert len(changes) == 1

    def test_invalid_file(self, tmp_path: Path):
        with pytest.raises(typer.BadParameter):
            load_changes(write_changes(tmp_path, [{"patch": "no filename"}]))

    def test_unreadable_file(self, tmp_path: Path):
        path = tmp_path / "changes.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(typer.BadParameter):
            load_changes(path)


class TestInit:
    def test_init_writes_template(self, tmp_path: Path):
        result = runner.invoke(app, ["init", str(tmp_path)])

        assert result.exit_code == 0
        assert "Created" in result.output
        assert (tmp_path / CONFIG_FILENAME).exists()

    def test_init_keeps_existing(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("watchPaths: []\n", encoding="utf-8")

        result = runner.invoke(app, ["init", str(tmp_path)])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert (tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8") == "watchPaths: []\n"


class TestSuggest:
    """Tests for the suggest command."""

    def test_unwatched_changes_are_skipped(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        changes = write_changes(tmp_path, [{"filename": "package.json", "patch": "+{}"}])

        result = runner.invoke(app, ["suggest", str(repo), "--changes", str(changes)])

        assert result.exit_code == 0
        assert "No watched files changed, skipping analysis" in result.output

    def test_heuristic_suggestion_is_rendered_and_stored(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        changes = write_changes(tmp_path, [EXPORT_CHANGE])
        out = tmp_path / "suggestions.jsonl"

        result = runner.invoke(
            app,
            [
                "suggest",
                str(repo),
                "--changes",
                str(changes),
                "--title",
                "Add foo",
                "--out",
                str(out),
            ],
        )

        assert result.exit_code == 0
        assert "ReadmeMuse: Documentation Suggestions" in result.output
        assert "### README.md" in result.output
        assert "+- Add foo" in result.output
        stored = read_suggestions(out)
        assert [s.file_path for s in stored] == ["README.md"]

    def test_repository_config_is_used(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        (repo / CONFIG_FILENAME).write_text(
            "watchPaths: ['lib/**']\ndocumentationFiles: ['README.md']\n",
            encoding="utf-8",
        )
        changes = write_changes(tmp_path, [EXPORT_CHANGE])

        result = runner.invoke(app, ["suggest", str(repo), "--changes", str(changes)])

        assert result.exit_code == 0
        assert "No watched files changed" in result.output

    def test_no_suggestions(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        quiet = {"filename": "src/util.py", "patch": "@@ -1 +1 @@\n-a = 1\n+a = 2"}
        changes = write_changes(tmp_path, [quiet])

        result = runner.invoke(app, ["suggest", str(repo), "--changes", str(changes)])

        assert result.exit_code == 0
        assert "No documentation suggestions" in result.output

    def test_llm_requires_api_key(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        repo = make_repo(tmp_path)
        changes = write_changes(tmp_path, [EXPORT_CHANGE])

        result = runner.invoke(app, ["suggest", str(repo), "--changes", str(changes), "--llm"])

        assert result.exit_code != 0
        assert API_KEY_ENV in result.output

    def test_draft_pr_mode_prints_branch_title_and_body(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        (repo / CONFIG_FILENAME).write_text(
            "watchPaths: ['src/**/*']\ndocumentationFiles: ['README.md']\ncreateDraftPR: true\n",
            encoding="utf-8",
        )
        changes = write_changes(tmp_path, [EXPORT_CHANGE])

        result = runner.invoke(
            app,
            ["suggest", str(repo), "--changes", str(changes), "--title", "Add foo", "--pr-number", "7"],
        )

        assert result.exit_code == 0
        assert "Branch: readmemuse-sync-7" in result.output
        assert "Documentation updates for PR #7" in result.output
        assert "based on changes in PR #7" in result.output
        assert "**Title:** Add foo" in result.output
        assert "#### README.md" in result.output
        assert "Documentation Suggestions" not in result.output

    def test_draft_pr_mode_requires_pr_number(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        (repo / CONFIG_FILENAME).write_text(
            "watchPaths: ['src/**/*']\ndocumentationFiles: ['README.md']\ncreateDraftPR: true\n",
            encoding="utf-8",
        )
        changes = write_changes(tmp_path, [EXPORT_CHANGE])

        result = runner.invoke(app, ["suggest", str(repo), "--changes", str(changes)])

        assert result.exit_code != 0
        assert "--pr-number" in result.output

    def test_comment_mode_ignores_pr_number(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        changes = write_changes(tmp_path, [EXPORT_CHANGE])

        result = runner.invoke(
            app, ["suggest", str(repo), "--changes", str(changes), "--pr-number", "7"]
        )

        assert result.exit_code == 0
        assert "ReadmeMuse: Documentation Suggestions" in result.output
        assert "readmemuse-sync-7" not in result.output


class TestApply:
    """Tests for the apply command."""

    def test_apply_writes_files(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        suggestions = tmp_path / "suggestions.jsonl"
        write_suggestions(
            suggestions,
            [
                Suggestion(
                    file_path="README.md",
                    diff_patch="@@ -1,3 +1,4 @@\n # Proj\n \n Body\n+More",
                    summary="s",
                    reasoning="r",
                )
            ],
        )

        result = runner.invoke(app, ["apply", str(repo), "--suggestions", str(suggestions)])

        assert result.exit_code == 0
        assert "Updated README.md" in result.output
        assert "docs: s" in result.output
        assert (repo / "README.md").read_text(encoding="utf-8") == "# Proj\n\nBody\nMore"

    def test_apply_unknown_pass(self, tmp_path: Path):
        repo = make_repo(tmp_path)
        suggestions = tmp_path / "suggestions.jsonl"
        write_suggestions(
            suggestions,
            [Suggestion(file_path="README.md", diff_patch="+x", summary="s", reasoning="r")],
            pass_id="first",
        )

        result = runner.invoke(
            app,
            ["apply", str(repo), "--suggestions", str(suggestions), "--pass", "other"],
        )

        assert result.exit_code == 0
        assert "No suggestions to apply" in result.output
        assert (repo / "README.md").read_text(encoding="utf-8") == "# Proj\n\nBody"

    def test_apply_missing_suggestions_file(self, tmp_path: Path):
        result = runner.invoke(
            app,
            ["apply", str(tmp_path), "--suggestions", str(tmp_path / "missing.jsonl")],
        )

        assert result.exit_code != 0


class TestPatch:
    """Tests for the patch command."""

    def test_patch_prints_result(self, tmp_path: Path):
        original = tmp_path / "README.md"
        original.write_text("a\nb\nc", encoding="utf-8")
        patch_file = tmp_path / "change.diff"
        patch_file.write_text(
            "--- a/README.md\n+++ b/README.md\n@@ -2,1 +2,1 @@\n-b\n+B\n",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["-v", "patch", str(original), str(patch_file)])

        assert result.exit_code == 0
        assert "a\nB\nc" in result.output
        assert original.read_text(encoding="utf-8") == "a\nb\nc"

    def test_patch_check_reports_problems(self, tmp_path: Path):
        original = tmp_path / "README.md"
        original.write_text("# Proj", encoding="utf-8")
        patch_file = tmp_path / "change.diff"
        patch_file.write_text("not a diff", encoding="utf-8")

        result = runner.invoke(app, ["patch", str(original), str(patch_file), "--check"])

        assert result.exit_code == 0
        assert "warning: no hunk header found" in result.output
        assert MANUAL_REVIEW_MARKER in result.output

    def test_patch_missing_original_starts_empty(self, tmp_path: Path):
        patch_file = tmp_path / "new.diff"
        patch_file.write_text("--- /dev/null\n+++ b/NEW.md\n@@ -0,0 +1 @@\n+# New\n", encoding="utf-8")

        result = runner.invoke(app, ["patch", str(tmp_path / "NEW.md"), str(patch_file)])

        assert result.exit_code == 0
        assert "# New" in result.output
