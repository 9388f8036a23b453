"""
Testimonial routes - owner listing and moderation
"""
import logging
from fastapi import APIRouter, HTTPException, status, Depends, Query
from praisewall.config.database import Collections
from praisewall.config.settings import settings
from praisewall.database.codec import TESTIMONIAL_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.models.testimonial import TestimonialList, TestimonialResponse, TestimonialStatus
from praisewall.services import moderation
from praisewall.services.moderation import InvalidTransition, TestimonialNotFound
from praisewall.utils.auth import get_current_user
from praisewall.utils.helpers import clamp_limit, serialize_doc, serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/testimonials", tags=["Testimonials"])

@router.get("/", response_model=TestimonialList)
async def get_testimonials(
    status_filter: str = Query("all", alias="status"),
    form_id: str = None,
    skip: int = 0,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    current_user: dict = Depends(get_current_user)
):
    """Testimonials of the account, newest first, optionally filtered by status or form"""
    filter_query = {"user_id": current_user["sub"]}
    if status_filter != "all":
        try:
            filter_query["status"] = TestimonialStatus(status_filter).value
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="status must be one of all, pending, approved, rejected"
            )
    if form_id:
        filter_query["form_id"] = form_id

    testimonials = await db_ops.get_all(
        Collections.TESTIMONIALS,
        filter_query,
        skip=max(skip, 0),
        limit=clamp_limit(limit),
        sort=[("created_at", -1)],
    )
    return {
        "testimonials": serialize_docs(TESTIMONIAL_CODEC.decode_all(testimonials)),
        "total": await db_ops.count(Collections.TESTIMONIALS, filter_query),
    }

async def moderate(testimonial_id: str, account_id: str, target: TestimonialStatus):
    try:
        updated = await moderation.set_status(testimonial_id, account_id, target)
    except TestimonialNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Testimonial not found")
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        logger.exception("Error moderating testimonial %s", testimonial_id)
        raise HTTPException(status_code=500, detail="Error updating testimonial")
    return serialize_doc(updated)

@router.patch("/{testimonial_id}/approve", response_model=TestimonialResponse)
async def approve_testimonial(
    testimonial_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Approve a pending testimonial"""
    return await moderate(testimonial_id, current_user["sub"], TestimonialStatus.APPROVED)

@router.patch("/{testimonial_id}/reject", response_model=TestimonialResponse)
async def reject_testimonial(
    testimonial_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Reject a pending testimonial"""
    return await moderate(testimonial_id, current_user["sub"], TestimonialStatus.REJECTED)
