# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: YAML template loading and rendering for medication replies.
# ============================================================================
"""
Medication Response Templates - YAML loading and variable substitution.

Responsibilities:
- Load ``medication/responses.yaml`` once
- Check every template the generator needs is present
- Render templates with {placeholder} substitution
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from ..exceptions import ResponseTemplateError

logger = logging.getLogger(__name__)

RESPONSES_FILE = "medication/responses.yaml"
DEFAULT_RESPONSES_PATH = Path(__file__).parents[3] / "prompts" / "templates" / RESPONSES_FILE

REQUIRED_TEMPLATES = (
    "check_status_resolved",
    "check_status_unresolved",
    "get_info_resolved",
    "get_info_unresolved",
    "mark_taken_named",
    "mark_taken_unnamed",
    "add_medication",
    "fallback",
)

_PLACEHOLDER = re.compile(r"\{([a-z_]+)\}")
_MULTISPACE = re.compile(r"[ \t]{2,}")


@dataclass(frozen=True)
class ResponseTemplates:
    """Loaded reply templates."""

    version: str
    templates: Mapping[str, str]

    def get(self, key: str) -> str:
        return self.templates[key]


def load_response_templates(path: Path | str | None = None) -> ResponseTemplates:
    """Load reply templates from YAML.

    Args:
        path: YAML file. Uses the bundled asset if None.

    Raises:
        ResponseTemplateError: If the file is missing, invalid, or incomplete.
    """
    yaml_path = Path(path) if path is not None else DEFAULT_RESPONSES_PATH

    try:
        content = yaml_path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except FileNotFoundError as e:
        logger.error("Response templates not found at %s", yaml_path)
        raise ResponseTemplateError("Response templates file not found", path=yaml_path) from e
    except yaml.YAMLError as e:
        logger.error("Error parsing response templates YAML: %s", e)
        raise ResponseTemplateError(f"Invalid YAML: {e}", path=yaml_path) from e

    if not isinstance(data, dict) or not isinstance(data.get("templates"), dict):
        raise ResponseTemplateError("Expected a 'templates' mapping", path=yaml_path)

    templates = {str(key): str(value).strip() for key, value in data["templates"].items()}
    missing = [key for key in REQUIRED_TEMPLATES if not templates.get(key)]
    if missing:
        raise ResponseTemplateError("Missing response templates", path=yaml_path, missing_keys=missing)

    logger.debug("Loaded %d response templates from %s", len(templates), yaml_path)
    return ResponseTemplates(
        version=str(data.get("version", "unversioned")),
        templates=MappingProxyType(templates),
    )


class ResponseTemplateRenderer:
    """Renders templates with {variable} substitution."""

    def render(self, template: str, variables: Mapping[str, Any]) -> str:
        """
        Render template with variables.

        Missing variables are removed and doubled spaces collapsed.

        Args:
            template: Template string with {placeholders}
            variables: Values to substitute

        Returns:
            Rendered string
        """
        if not template:
            return ""

        def substitute(match: re.Match[str]) -> str:
            value = variables.get(match.group(1))
            return "" if value is None else str(value)

        # Single pass, so substituted values are never re-expanded
        result = _PLACEHOLDER.sub(substitute, template)
        return _MULTISPACE.sub(" ", result).strip()


_default_templates: ResponseTemplates | None = None


def get_default_response_templates() -> ResponseTemplates:
    """Return the bundled templates, loading them on first use."""
    global _default_templates
    if _default_templates is None:
        _default_templates = load_response_templates()
    return _default_templates
