"""Helpers for SMS message templates.

Templates use ``{{variable}}`` placeholders. Rendering substitutes known
variables and leaves unknown placeholders untouched, so a typo in a template
shows up in the delivered text instead of silently vanishing.
"""

import math
import re
from collections.abc import Mapping

PLACEHOLDER_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")
MAX_TEMPLATE_LENGTH = 1000
SMS_UNIT_LENGTH = 160


def extract_variables(content: str) -> list[str]:
    """Return the distinct placeholder names in *content*, in order of first use."""
    return list(dict.fromkeys(PLACEHOLDER_RE.findall(content)))


def render_template(content: str, context: Mapping[str, object]) -> str:
    """Substitute ``{{name}}`` placeholders with values from *context*.

    ``None`` values render as an empty string. Placeholders whose name is not
    in *context* are kept as written.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in context:
            return match.group(0)
        value = context[name]
        return "" if value is None else str(value)

    return PLACEHOLDER_RE.sub(_replace, content)


def validate_template_content(content: str) -> list[str]:
    """Return a list of problems with *content*; empty when it is valid."""
    errors: list[str] = []
    if not content or not content.strip():
        errors.append("Template content is required.")
        return errors
    if len(content) > MAX_TEMPLATE_LENGTH:
        errors.append(f"Template content must be at most {MAX_TEMPLATE_LENGTH} characters.")
    if "{{" in PLACEHOLDER_RE.sub("", content):
        errors.append("Template contains an unclosed '{{' placeholder.")
    return errors


def calculate_sms_units(message: str) -> int:
    """Return how many SMS units *message* occupies (at least one)."""
    return max(1, math.ceil(len(message) / SMS_UNIT_LENGTH))
