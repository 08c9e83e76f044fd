import logging
from collections.abc import Iterable, Sequence
from fnmatch import fnmatchcase
from pathlib import Path

from readmemuse.suggestions.models import DocumentSnapshot

logger = logging.getLogger(__name__)

IGNORED_PARTS = {".git", "node_modules", "__pycache__", "build"}


class PathEscapeError(Exception):
    def __init__(self, candidate: Path, repo_root: Path):
        super().__init__(f"Candidate {str(candidate)} is not relative to repository: {str(repo_root)}")


class SymLinkError(Exception):
    def __init__(self, path: Path):
        super().__init__(f"Path contains symlink: {str(path)}")


def matches_pattern(path: str, pattern: str) -> bool:
    """
    Glob match of a repository-relative path.

    ``*`` also crosses directory separators, and ``**/`` matches zero or
    more directories, so ``docs/**/*.md`` matches ``docs/index.md``.
    """
    path = path.removeprefix("./")
    if fnmatchcase(path, pattern):
        return True
    return "**/" in pattern and fnmatchcase(path, pattern.replace("**/", ""))


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(matches_pattern(path, pattern) for pattern in patterns)


def match_files(files: Iterable[str], patterns: Sequence[str]) -> list[str]:
    return [file for file in files if matches_any(file, patterns)]


def should_analyze(changed_files: Iterable[str], watch_paths: Sequence[str]) -> bool:
    """True when any changed file is under a watched path."""
    return any(matches_any(file, watch_paths) for file in changed_files)


def resolve_safe_path(
    repo_root: Path,
    relative_path: str,
    allow_symlinks: bool = False,
) -> Path:
    """
    Resolve a repository-relative path, refusing anything outside the root.

    Raises:
        PathEscapeError: If the resolved path would escape the repository
        SymLinkError: If symlinks are not allowed and the path contains one
    """

    repo_root = Path(repo_root).resolve()
    relative_path = relative_path.lstrip("/")
    candidate = (repo_root / relative_path).resolve()

    if not candidate.is_relative_to(repo_root):
        logger.warning("Path escape attempt: %s is not relative to %s", candidate, repo_root)
        raise PathEscapeError(candidate, repo_root)

    if not allow_symlinks:
        # walk the unresolved parts; resolve() has already followed any links
        path_so_far = repo_root
        for part in Path(relative_path).parts:
            path_so_far = path_so_far / part
            if path_so_far.is_symlink():
                logger.warning("Symlink blocked: %s", path_so_far)
                raise SymLinkError(path_so_far)

    return candidate


def find_documentation_files(repo_root: Path, patterns: Sequence[str]) -> list[DocumentSnapshot]:
    """
    Read every file under ``repo_root`` matching one of ``patterns``.

    Patterns are matched with ``matches_any``, the same matcher used for
    watch paths. Hidden and vendored directories and symlinks are skipped;
    so are files that are not UTF-8 text.
    """

    repo_root = Path(repo_root).resolve()
    found: set[Path] = set()
    for candidate in repo_root.rglob("*"):
        if not candidate.is_file() or candidate.is_symlink():
            continue
        relative = candidate.relative_to(repo_root)
        if any(part in IGNORED_PARTS or part.startswith(".") for part in relative.parts):
            continue
        if matches_any(relative.as_posix(), patterns):
            found.add(candidate)

    docs: list[DocumentSnapshot] = []
    for path in sorted(found):
        relative = path.relative_to(repo_root).as_posix()
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read file %s: %s", relative, e)
            continue
        docs.append(DocumentSnapshot(path=relative, content=content))

    logger.debug("Found %d documentation files for %d patterns", len(docs), len(patterns))
    return docs
