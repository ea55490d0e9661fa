# src/app/domain/content.py
"""
Recipe content envelope.

Stored content comes in three historical shapes:
- {"instructions": "..."}  current structured format
- {"content": "..."}       legacy format
- "..."                    bare string

`parse_content` resolves the shape once at the data boundary; everything
downstream works with `content_text`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

MIN_AI_TEXT_LENGTH = 100
MAX_AI_TEXT_LENGTH = 10000

TOO_SHORT_MESSAGE = f"Recipe text must be at least {MIN_AI_TEXT_LENGTH} characters."
TOO_LONG_MESSAGE = f"Recipe text must not exceed {MAX_AI_TEXT_LENGTH} characters."


@dataclass(frozen=True)
class StructuredContent:
    instructions: str


@dataclass(frozen=True)
class LegacyContent:
    content: str


@dataclass(frozen=True)
class RawContent:
    text: str


RecipeContent = Union[StructuredContent, LegacyContent, RawContent]


def parse_content(value: Any) -> RecipeContent:
    if isinstance(value, dict):
        if "instructions" in value:
            return StructuredContent(instructions=str(value["instructions"]))
        if "content" in value:
            return LegacyContent(content=str(value["content"]))
    if isinstance(value, str):
        return RawContent(text=value)
    return RawContent(text="")


def content_text(value: Any) -> str:
    """Canonical text of a stored content envelope."""
    parsed = value if isinstance(value, (StructuredContent, LegacyContent, RawContent)) else parse_content(value)
    if isinstance(parsed, StructuredContent):
        return parsed.instructions
    if isinstance(parsed, LegacyContent):
        return parsed.content
    return parsed.text


def format_content(text: str) -> dict[str, str]:
    """Shape used for every new write."""
    return {"instructions": text.strip()}


def validate_text_for_ai(text: str) -> Optional[str]:
    """Returns an error message, or None when the text can be sent to the model."""
    length = len(text.strip())
    if length < MIN_AI_TEXT_LENGTH:
        return TOO_SHORT_MESSAGE
    if length > MAX_AI_TEXT_LENGTH:
        return TOO_LONG_MESSAGE
    return None
