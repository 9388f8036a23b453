"""
Form Schema Manager - ordered custom fields attached to a collection form

Fields are always handed out sorted ascending by order_index. Ties (which a
normal flow never produces) keep creation order, since the store is read in
creation order and Python's sort is stable.

Guard clauses never raise: a refused operation comes back as a SchemaResult
carrying a RejectReason so routes and tests can see why nothing happened.
"""
import logging
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any, Dict, List, Optional

from praisewall.config.database import Collections
from praisewall.database.codec import FIELD_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.models.form_field import MoveDirection
from praisewall.services.field_renderers import is_known_type

logger = logging.getLogger(__name__)

UPDATABLE_ATTRIBUTES = ("label", "placeholder", "required", "options")


class RejectReason(str, Enum):
    BLANK_LABEL = "blank_label"
    UNKNOWN_FIELD_TYPE = "unknown_field_type"
    FIELD_NOT_FOUND = "field_not_found"
    AT_BOUNDARY = "at_boundary"
    NO_CHANGES = "no_changes"


@dataclass
class SchemaResult:
    accepted: bool
    reason: Optional[RejectReason] = None
    field: Optional[Dict[str, Any]] = None
    fields: List[Dict[str, Any]] = dataclass_field(default_factory=list)

    @classmethod
    def accept(cls, field=None, fields=None) -> "SchemaResult":
        return cls(True, None, field, fields or [])

    @classmethod
    def reject(cls, reason: RejectReason, fields=None) -> "SchemaResult":
        return cls(False, reason, None, fields or [])


def sort_fields(fields: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(fields, key=lambda f: f.get("order_index") or 0)


def next_order_index(fields: List[Dict[str, Any]]) -> int:
    """max(order_index) + 1, or 0 for an empty form"""
    if not fields:
        return 0
    return max(f.get("order_index") or 0 for f in fields) + 1


def swap_with_neighbour(
    fields: List[Dict[str, Any]], field_id: str, direction: MoveDirection
) -> Optional[List[Dict[str, Any]]]:
    """New display order with field_id swapped with its neighbour.

    None when the field is unknown or already first (moving up) / last
    (moving down). The input list is not modified.
    """
    ids = [str(f["_id"]) for f in fields]
    if field_id not in ids:
        return None
    current = ids.index(field_id)
    target = current - 1 if direction == MoveDirection.UP else current + 1
    if target < 0 or target >= len(fields):
        return None
    reordered = list(fields)
    reordered[current], reordered[target] = reordered[target], reordered[current]
    return reordered


async def list_fields(form_id: str) -> List[Dict[str, Any]]:
    stored = await db_ops.get_all(
        Collections.FORM_FIELDS,
        {"form_id": form_id},
        sort=[("created_at", 1), ("_id", 1)],
    )
    return sort_fields(FIELD_CODEC.decode_all(stored))


async def get_field(form_id: str, field_id: str) -> Optional[Dict[str, Any]]:
    stored = await db_ops.get_by_id(Collections.FORM_FIELDS, field_id)
    if not stored or stored.get("form_id") != form_id:
        return None
    return FIELD_CODEC.decode(stored)


async def add_field(form_id: str, data: Dict[str, Any]) -> SchemaResult:
    label = (data.get("label") or "").strip()
    if not label:
        return SchemaResult.reject(RejectReason.BLANK_LABEL)
    field_type = data.get("field_type") or "text"
    if not is_known_type(field_type):
        return SchemaResult.reject(RejectReason.UNKNOWN_FIELD_TYPE)

    fields = await list_fields(form_id)
    record = {
        "form_id": form_id,
        "field_type": field_type,
        "label": data.get("label"),
        "placeholder": data.get("placeholder") or "",
        "required": bool(data.get("required")),
        "options": [opt for opt in (data.get("options") or []) if opt.strip()],
        "order_index": next_order_index(fields),
    }
    created = await db_ops.create(Collections.FORM_FIELDS, FIELD_CODEC.encode(record))
    field = FIELD_CODEC.decode(created)
    logger.info("Added %s field %s to form %s at position %d", field_type, field["_id"], form_id, record["order_index"])
    return SchemaResult.accept(field, fields + [field])


async def update_field(form_id: str, field_id: str, partial: Dict[str, Any]) -> SchemaResult:
    """Apply the given attributes only. order_index is never touched and a
    given options list replaces the previous one wholesale."""
    changes = {key: partial[key] for key in UPDATABLE_ATTRIBUTES if partial.get(key) is not None}
    if not changes:
        return SchemaResult.reject(RejectReason.NO_CHANGES)
    if "label" in changes and not changes["label"].strip():
        return SchemaResult.reject(RejectReason.BLANK_LABEL)
    if await get_field(form_id, field_id) is None:
        return SchemaResult.reject(RejectReason.FIELD_NOT_FOUND)

    updated = await db_ops.update(Collections.FORM_FIELDS, field_id, FIELD_CODEC.encode(changes))
    if updated is None:
        return SchemaResult.reject(RejectReason.FIELD_NOT_FOUND)
    return SchemaResult.accept(FIELD_CODEC.decode(updated), await list_fields(form_id))


async def delete_field(form_id: str, field_id: str) -> SchemaResult:
    """Remove a field; the remaining order_index values keep their gaps"""
    if await get_field(form_id, field_id) is None:
        return SchemaResult.reject(RejectReason.FIELD_NOT_FOUND)
    await db_ops.delete(Collections.FORM_FIELDS, field_id)
    return SchemaResult.accept(fields=await list_fields(form_id))


async def move_field(form_id: str, field_id: str, direction: MoveDirection) -> SchemaResult:
    """Swap a field with its neighbour, then rewrite every field's order_index
    with its list position so the form ends up numbered 0..N-1.

    The rewrite is one update per field, issued in order and without a
    transaction; a failure part-way leaves the earlier writes applied.
    """
    fields = await list_fields(form_id)
    if field_id not in {str(f["_id"]) for f in fields}:
        return SchemaResult.reject(RejectReason.FIELD_NOT_FOUND, fields)

    reordered = swap_with_neighbour(fields, field_id, MoveDirection(direction))
    if reordered is None:
        return SchemaResult.reject(RejectReason.AT_BOUNDARY, fields)

    for index, field in enumerate(reordered):
        await db_ops.update(Collections.FORM_FIELDS, str(field["_id"]), {"order_index": index})

    fields = await list_fields(form_id)
    moved = next(f for f in fields if str(f["_id"]) == field_id)
    return SchemaResult.accept(moved, fields)
