import logging
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import ValidationError

from paperbuild.rules.models import SiteRules

logger = logging.getLogger(__name__)


def _strip_yaml_fence(content: str) -> str:
    """Return the body of the first ```yaml block, or the whole text if there is none."""
    yaml_lines = []
    in_block = False
    found_block = False

    for line in content.splitlines():
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    return "\n".join(yaml_lines) if found_block else content


def parse_rules(content: str) -> SiteRules:
    """
    Parse and validate site rules from YAML text.
    Raises ValueError if YAML or schema is invalid.
    """
    try:
        data = yaml.safe_load(_strip_yaml_fence(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in site rules: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Site rules must be a YAML mapping")

    try:
        rules = SiteRules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Site rules validation failed:\n{e}") from e

    # An unknown zone is not fatal: publish times degrade to UTC instead.
    try:
        ZoneInfo(rules.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(
            f"Timezone '{rules.timezone}' is not known to this platform; "
            "scheduled posts will be resolved as UTC"
        )

    return rules


def load_rules(path: Path) -> SiteRules:
    """
    Load and validate the site rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Site rules file not found at: {path}")

    with open(path, encoding="utf-8") as f:
        content = f.read()

    return parse_rules(content)
