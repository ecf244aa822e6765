"""Rules-based command parser.

The parser is strict and deterministic: it classifies exactly one action and one entity by keyword,
pulls `key: value` facts out of the text and resolves the target record id. It never touches the
record store.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.agent.dictionaries import detect_action, detect_entity
from src.agent.errors import MissingCommandError, UnknownActionError, UnknownEntityError
from src.agent.extract import extract_record_id, parse_key_value_pairs
from src.agent.payloads import get_entity
from src.agent.schema import ParsedCommand


def parse_command(text: str | None, data: Mapping[str, Any] | None = None) -> ParsedCommand:
    """Classify a command and gather its field data.

    Raises:
        MissingCommandError: If the text is missing or blank.
        UnknownActionError: If no action keyword matches.
        UnknownEntityError: If no entity keyword matches.
    """

    if not isinstance(text, str) or not text.strip():
        raise MissingCommandError()

    action = detect_action(text)
    if action is None:
        raise UnknownActionError()

    kind = detect_entity(text)
    if kind is None:
        raise UnknownEntityError()

    facts = parse_key_value_pairs(text)
    explicit = dict(data or {})
    merged = {**facts, **explicit}

    return ParsedCommand(
        text=text,
        action=action,
        entity=get_entity(kind),
        facts=facts,
        data=explicit,
        record_id=extract_record_id(text, merged.get("id")),
    )
