"""Placeholder discovery and substitution for ``{{variable}}`` templates."""

import json
import re
from typing import Any, Iterator

# {{name}} or {{ name }}; braces are not allowed inside the name
PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")


def find_placeholders(text: str) -> list[str]:
    """Return placeholder names in order of first appearance, without duplicates."""
    names: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(text):
        name = match.group(1)
        if name and name not in names:
            names.append(name)
    return names


def iter_strings(value: Any) -> Iterator[str]:
    """Yield every string inside a nested dict/list structure, in document order."""
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_strings(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_strings(item)


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def substitute_variables(template: str, variables: dict[str, Any]) -> str:
    """Substitute {{variable}} placeholders in the template.

    Supports both {{variable}} and {{ variable }} syntax. Unknown
    placeholders are left untouched.
    """

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in variables:
            return match.group(0)
        return _render_value(variables[name])

    return PLACEHOLDER_PATTERN.sub(_replace, template)
