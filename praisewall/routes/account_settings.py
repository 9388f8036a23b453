"""
Account settings - branding defaults, custom CSS, notification preference
"""
import logging
from fastapi import APIRouter, HTTPException, Depends
from praisewall.config.database import Collections
from praisewall.config.settings import settings
from praisewall.database.codec import SETTINGS_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.models.account_settings import AccountSettingsResponse, AccountSettingsUpdate
from praisewall.utils.auth import get_current_user
from praisewall.utils.helpers import serialize_doc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])

@router.get("/", response_model=AccountSettingsResponse)
async def get_settings(current_user: dict = Depends(get_current_user)):
    """Saved settings, or the defaults when nothing was saved yet"""
    saved = await db_ops.get_one(Collections.ACCOUNT_SETTINGS, {"user_id": current_user["sub"]})
    if not saved:
        return AccountSettingsResponse(
            user_id=current_user["sub"], brand_color=settings.DEFAULT_BRAND_COLOR
        )
    return serialize_doc(SETTINGS_CODEC.decode(saved))

@router.put("/", response_model=AccountSettingsResponse)
async def save_settings(
    payload: AccountSettingsUpdate,
    current_user: dict = Depends(get_current_user)
):
    """Create the settings record on first save, update it in place afterwards"""
    data = SETTINGS_CODEC.encode({**payload.model_dump(), "user_id": current_user["sub"]})
    try:
        saved = await db_ops.get_one(Collections.ACCOUNT_SETTINGS, {"user_id": current_user["sub"]})
        if saved:
            result = await db_ops.update(Collections.ACCOUNT_SETTINGS, str(saved["_id"]), data)
        else:
            result = await db_ops.create(Collections.ACCOUNT_SETTINGS, data)
    except Exception:
        logger.exception("Error saving settings for %s", current_user["sub"])
        raise HTTPException(status_code=500, detail="Error saving settings")
    return serialize_doc(SETTINGS_CODEC.decode(result))
