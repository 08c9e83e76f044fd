from readmemuse.repo.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    InvalidConfigError,
    ReadmeMuseConfig,
    load_config,
    parse_config,
    write_config_template,
)
from readmemuse.repo.materialize import apply_suggestion, apply_suggestions
from readmemuse.repo.paths import (
    PathEscapeError,
    find_documentation_files,
    match_files,
    matches_any,
    resolve_safe_path,
    should_analyze,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "InvalidConfigError",
    "ReadmeMuseConfig",
    "load_config",
    "parse_config",
    "write_config_template",
    "apply_suggestion",
    "apply_suggestions",
    "PathEscapeError",
    "find_documentation_files",
    "match_files",
    "matches_any",
    "resolve_safe_path",
    "should_analyze",
]
