import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".readmemuse.yml"

CONFIG_TEMPLATE = """\
# Configuration for ReadmeMuse
# This file defines which paths to watch and which documentation files to update

# List of file patterns to watch for changes
# When files matching these patterns change, documentation updates will be suggested
watchPaths:
  - "src/**/*"
  - "lib/**/*"
  - "api/**/*"

# List of documentation files to analyze for updates
# These files will be checked for needed updates when watched files change
documentationFiles:
  - "README.md"
  - "docs/**/*.md"

# Optional: Examples of your repository's writing style and tone
# These help ReadmeMuse match your unique voice when generating suggestions
# Add 2-3 representative snippets from your existing documentation
toneExamples:
  - "Write clear, concise documentation."

# Optional: open a draft PR with the changes applied instead of commenting
createDraftPR: false
"""


class InvalidConfigError(Exception):
    pass


class ReadmeMuseConfig(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )

    watch_paths: list[str] = Field(alias="watchPaths")
    documentation_files: list[str] = Field(alias="documentationFiles")
    tone_examples: list[str] = Field(default_factory=list, alias="toneExamples")
    create_draft_pr: bool = Field(default=False, alias="createDraftPR")


DEFAULT_CONFIG = ReadmeMuseConfig(
    watch_paths=["src/**/*", "lib/**/*", "api/**/*"],
    documentation_files=["README.md", "docs/**/*.md"],
)


def parse_config(text: str) -> ReadmeMuseConfig:
    """
    Parse the YAML text of a ``.readmemuse.yml`` file.

    Raises:
        InvalidConfigError: if the text is not YAML, not a mapping, or does
            not match the configuration schema.
    """

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidConfigError(f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise InvalidConfigError("Config must be a mapping")

    try:
        return ReadmeMuseConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigError(str(e)) from e


def load_config(repo_root: Path) -> ReadmeMuseConfig:
    """Load the repository's configuration, or the defaults when it is missing or invalid."""

    config_path = Path(repo_root) / CONFIG_FILENAME
    if not config_path.exists():
        logger.info("No %s found, using default configuration", CONFIG_FILENAME)
        return DEFAULT_CONFIG

    try:
        config = parse_config(config_path.read_text(encoding="utf-8"))
    except (InvalidConfigError, OSError, UnicodeDecodeError) as e:
        logger.warning("Error loading config: %s, using default configuration", e)
        return DEFAULT_CONFIG

    logger.info("Loaded config from %s", config_path)
    return config


def write_config_template(repo_root: Path) -> bool:
    """Create ``.readmemuse.yml`` unless one exists. Returns True when it was written."""

    config_path = Path(repo_root) / CONFIG_FILENAME
    if config_path.exists():
        logger.info("%s already exists, skipping", config_path)
        return False

    config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8", newline="\n")
    logger.info("Created %s", config_path)
    return True
