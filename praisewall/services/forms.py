"""
Collection form lookups shared by the owner and public routes
"""
from typing import Any, Dict, Optional

from praisewall.config.database import Collections
from praisewall.config.settings import settings
from praisewall.database.codec import FORM_CODEC, SETTINGS_CODEC
from praisewall.database.db_operations import db_ops


async def get_form(form_id: str) -> Optional[Dict[str, Any]]:
    return FORM_CODEC.decode(await db_ops.get_by_id(Collections.FORMS, form_id))


async def get_active_form(form_id: str) -> Optional[Dict[str, Any]]:
    form = await get_form(form_id)
    if not form or not form.get("is_active"):
        return None
    return form


async def get_owned_form(form_id: str, account_id: str) -> Optional[Dict[str, Any]]:
    form = await get_form(form_id)
    if not form or form.get("user_id") != account_id:
        return None
    return form


async def create_form(account_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """New active form; branding not given falls back to the account settings"""
    saved = SETTINGS_CODEC.decode(
        await db_ops.get_one(Collections.ACCOUNT_SETTINGS, {"user_id": account_id})
    ) or {}
    record = {
        "user_id": account_id,
        "title": data["title"],
        "description": data.get("description") or "",
        "questions": data.get("questions") or [],
        "allow_video": data.get("allow_video", True),
        "require_approval": data.get("require_approval", True),
        "brand_color": data.get("brand_color") or saved.get("brand_color") or settings.DEFAULT_BRAND_COLOR,
        "company_name": data.get("company_name") or saved.get("company_name") or "",
        "company_logo": data.get("company_logo") or saved.get("company_logo") or "",
        "is_active": True,
    }
    created = await db_ops.create(Collections.FORMS, FORM_CODEC.encode(record))
    return FORM_CODEC.decode(created)


async def update_form(form_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    updated = await db_ops.update(Collections.FORMS, form_id, FORM_CODEC.encode(changes))
    return FORM_CODEC.decode(updated)
