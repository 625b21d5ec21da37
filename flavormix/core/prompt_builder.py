"""Prompt rendering for mix generation."""

from typing import Iterable, List

from config.settings import PROMPT_TEMPLATES
from flavormix.core.catalog import FlavorRecord
from flavormix.models.schemas import ChatMessage

RECORD_SEPARATOR = "; "


def render_flavor(record: FlavorRecord) -> str:
    """Render one flavor as a single catalog entry."""
    return f"Name: {record.name}, Type: {record.type}, Ingredients: {record.ingredients_text}"


def render_catalog(records: Iterable[FlavorRecord]) -> str:
    """Render the whole catalog as one inline clause."""
    return RECORD_SEPARATOR.join(render_flavor(record) for record in records)


def build_prompt(records: Iterable[FlavorRecord], query: str) -> str:
    """
    Render the user prompt for a mix request.

    The catalog is embedded in full; nothing is truncated or deduplicated.
    """
    return PROMPT_TEMPLATES["mix_request"].format(
        catalog=render_catalog(records),
        query=query
    )


def build_messages(prompt: str) -> List[ChatMessage]:
    """Wrap a rendered prompt in the system/user conversation."""
    return [
        ChatMessage(role="system", content=PROMPT_TEMPLATES["mix_system"]),
        ChatMessage(role="user", content=prompt)
    ]
