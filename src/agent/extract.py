"""Field and identifier extraction from free-form command text."""

from __future__ import annotations

import re
from typing import Any

from src.agent.normalize import parse_number, to_boolean
from src.agent.schema import FactValue

_KEY_VALUE_RE = re.compile(
    r"""(\b[\w.]+)\s*[:=]\s*("[^"]+"|'[^']+'|[^,;\n]+)""",
    flags=re.IGNORECASE,
)
_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", flags=re.ASCII)
_RECORD_ID_RE = re.compile(r"\b(?:id|record)\s*[:=]\s*([a-z0-9-]{6,})", flags=re.IGNORECASE)
_UUID_RE = re.compile(
    r"\b([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})\b",
    flags=re.IGNORECASE,
)

# Workflow columns hold words such as "Approved"/"Denied" verbatim.
_TEXT_ONLY_KEYS: frozenset[str] = frozenset({"status", "stage"})


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def _coerce(key: str, value: str) -> FactValue:
    if _ISO_DATE_RE.fullmatch(value):
        return value

    number = parse_number(value)
    if number is not None:
        return number

    if key not in _TEXT_ONLY_KEYS:
        flag = to_boolean(value)
        if flag is not None:
            return flag

    return value.strip()


def parse_key_value_pairs(text: str | None) -> dict[str, FactValue]:
    """Extract `key: value` / `key=value` facts from a command.

    Values are typed in this order: ISO date (kept as the `YYYY-MM-DD` string), finite number,
    yes/no word, plain string. Later duplicates of a key overwrite earlier ones.
    """

    facts: dict[str, FactValue] = {}
    if not text:
        return facts

    for match in _KEY_VALUE_RE.finditer(text):
        key = match.group(1).lower()
        value = _unquote(match.group(2).strip())
        facts[key] = _coerce(key, value)
    return facts


def extract_record_id(text: str, explicit: Any = None) -> str | None:
    """Resolve the target record id.

    An explicit id (already present in the merged data) wins; otherwise look for an `id:`/`record:`
    token, then for a bare UUID anywhere in the text.
    """

    if explicit is not None and explicit != "" and explicit is not False:
        return str(explicit)

    match = _RECORD_ID_RE.search(text or "")
    if match:
        return match.group(1)

    uuid_match = _UUID_RE.search(text or "")
    if uuid_match:
        return uuid_match.group(1)

    return None
