import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

logger = logging.getLogger(__name__)


def parse_rules(data: Any) -> Rules:
    """
    Validate already-parsed rules data.
    Raises ValueError if the schema is invalid.
    """
    if not isinstance(data, dict):
        raise ValueError("Rules validation failed: top level must be a mapping")

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        # Re-raise with a clear message for the caller/logs
        raise ValueError(f"Rules validation failed:\n{e}") from e


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    content = path.read_text()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    rules = parse_rules(data)
    logger.info(
        "Loaded rules %s (version %s) from %s",
        rules.project.slug,
        rules.project.rules_version,
        path,
    )
    return rules
