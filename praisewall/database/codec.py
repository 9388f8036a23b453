"""
Storage boundary encoding

The backing store keeps booleans as the string literals "0"/"1", list and
mapping attributes as JSON text and ratings as numeric strings. Services work
with native types only; every document passes through a RecordCodec on its
way in and out of the store.
"""
import json
from typing import Any, Dict, Iterable, List, Optional

FLAG_TRUE = "1"
FLAG_FALSE = "0"


def encode_flag(value: Any) -> str:
    return FLAG_TRUE if value else FLAG_FALSE


def decode_flag(raw: Any) -> bool:
    """Numeric coercion: "1", 1, "2" are true; "0", "", None and garbage are false"""
    if isinstance(raw, bool):
        return raw
    try:
        return float(raw) > 0
    except (TypeError, ValueError):
        return False


def encode_json(value: Any) -> str:
    return json.dumps(value)


def decode_list(raw: Any) -> List[Any]:
    if isinstance(raw, list):
        return raw
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return []
    return parsed if isinstance(parsed, list) else []


def decode_mapping(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def encode_number(value: Any) -> str:
    return str(value)


def decode_number(raw: Any) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return None


class RecordCodec:
    """Converts one collection's documents between domain and stored shape.

    Only the attributes named at construction are touched; everything else is
    passed through. Encoding skips attributes absent from the document so that
    partial updates stay partial.
    """

    def __init__(
        self,
        flags: Iterable[str] = (),
        lists: Iterable[str] = (),
        mappings: Iterable[str] = (),
        numbers: Iterable[str] = (),
    ):
        self.flags = tuple(flags)
        self.lists = tuple(lists)
        self.mappings = tuple(mappings)
        self.numbers = tuple(numbers)

    def encode(self, document: Dict[str, Any]) -> Dict[str, Any]:
        stored = dict(document)
        for key in self.flags:
            if key in stored:
                stored[key] = encode_flag(stored[key])
        for key in self.lists:
            if key in stored:
                stored[key] = encode_json(list(stored[key] or []))
        for key in self.mappings:
            if key in stored:
                stored[key] = encode_json(dict(stored[key] or {}))
        for key in self.numbers:
            if key in stored and stored[key] is not None:
                stored[key] = encode_number(stored[key])
        return stored

    def decode(self, stored: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if stored is None:
            return None
        document = dict(stored)
        for key in self.flags:
            document[key] = decode_flag(document.get(key))
        for key in self.lists:
            document[key] = decode_list(document.get(key))
        for key in self.mappings:
            document[key] = decode_mapping(document.get(key))
        for key in self.numbers:
            if key in document:
                document[key] = decode_number(document[key])
        return document

    def decode_all(self, stored: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [self.decode(doc) for doc in stored]


FORM_CODEC = RecordCodec(
    flags=("allow_video", "require_approval", "is_active"),
    lists=("questions",),
)
FIELD_CODEC = RecordCodec(flags=("required",), lists=("options",))
TESTIMONIAL_CODEC = RecordCodec(mappings=("custom_fields",), numbers=("rating",))
SETTINGS_CODEC = RecordCodec(flags=("email_notifications",))
