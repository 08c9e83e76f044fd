from pydantic import BaseModel, ConfigDict, Field


class FileChange(BaseModel):
    """One file of a pull request, as listed by the version-control host."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    filename: str
    patch: str = ""
    additions: int = 0
    deletions: int = 0
    changes: int = 0


class DocumentSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    content: str


class Suggestion(BaseModel):
    """
    A proposed documentation edit.

    Serialized with camelCase field names (``filePath``, ``diffPatch``) for
    the comment and commit collaborators; either spelling is accepted on
    input.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_path: str = Field(alias="filePath")
    diff_patch: str = Field(alias="diffPatch")
    summary: str
    reasoning: str


class AnalysisInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    changed_files: list[FileChange]
    doc_files: list[DocumentSnapshot]
    pr_title: str = ""
    pr_body: str = ""
    pr_diff: str = ""
    repository: str = ""
    branch: str = ""
    tone_examples: list[str] = Field(default_factory=list)

    @property
    def code_diff(self) -> str:
        """The full pull request diff, or the per-file patches when it is absent."""
        if self.pr_diff:
            return self.pr_diff
        return "\n".join(
            f"--- a/{change.filename}\n+++ b/{change.filename}\n{change.patch}"
            for change in self.changed_files
            if change.patch
        )
