"""
Utility functions for the record generator.
"""

from __future__ import annotations

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def to_pascal_case(text: str) -> str:
    """Convert snake_case, kebab-case or camelCase text to PascalCase.

    Examples:
        "shapes" -> "Shapes"
        "app_config" -> "AppConfig"
        "appConfig" -> "AppConfig"
        "v2-schema" -> "V2Schema"
    """
    if not text:
        return ""
    normalized = text.replace("_", " ").replace("-", " ").replace(".", " ")
    words = _WORD_PATTERN.findall(normalized)
    return "".join(word[0].upper() + word[1:] for word in words if word)


def doc_lines(text: str | None) -> list[str]:
    """Split documentation text into lines without surrounding blank lines."""
    if not text:
        return []
    lines = [line.rstrip() for line in text.strip().splitlines()]
    return lines
