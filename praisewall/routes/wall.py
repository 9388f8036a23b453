"""
Wall of Love - approved testimonials only
"""
from typing import List
from fastapi import APIRouter, Depends
from praisewall.config.database import Collections
from praisewall.database.codec import TESTIMONIAL_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.models.testimonial import TestimonialResponse, TestimonialStatus
from praisewall.utils.auth import get_current_user
from praisewall.utils.helpers import serialize_docs

router = APIRouter(prefix="/wall", tags=["Wall of Love"])

@router.get("/", response_model=List[TestimonialResponse])
async def get_wall(current_user: dict = Depends(get_current_user)):
    testimonials = await db_ops.get_all(
        Collections.TESTIMONIALS,
        {"user_id": current_user["sub"], "status": TestimonialStatus.APPROVED.value},
        sort=[("created_at", -1)],
    )
    return serialize_docs(TESTIMONIAL_CODEC.decode_all(testimonials))
