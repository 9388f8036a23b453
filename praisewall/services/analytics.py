"""
Usage numbers for the dashboard and analytics pages
"""
from typing import Any, Dict, List

from praisewall.config.database import Collections
from praisewall.database.codec import TESTIMONIAL_CODEC, FORM_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.models.testimonial import TestimonialStatus

RECENT_LIMIT = 5


def average_rating(testimonials: List[Dict[str, Any]]) -> float:
    ratings = [t["rating"] for t in testimonials if t.get("rating") is not None]
    if not ratings:
        return 0
    return round(sum(ratings) / len(ratings), 1)


def count_status(testimonials: List[Dict[str, Any]], status: TestimonialStatus) -> int:
    return sum(1 for t in testimonials if t.get("status") == status.value)


def rating_distribution(testimonials: List[Dict[str, Any]]) -> Dict[str, int]:
    distribution = {str(stars): 0 for stars in range(1, 6)}
    for t in testimonials:
        key = str(t.get("rating"))
        if key in distribution:
            distribution[key] += 1
    return distribution


async def load_testimonials(account_id: str) -> List[Dict[str, Any]]:
    stored = await db_ops.get_all(
        Collections.TESTIMONIALS, {"user_id": account_id}, sort=[("created_at", -1)]
    )
    return TESTIMONIAL_CODEC.decode_all(stored)


async def account_analytics(account_id: str) -> Dict[str, Any]:
    testimonials = await load_testimonials(account_id)
    forms = FORM_CODEC.decode_all(
        await db_ops.get_all(Collections.FORMS, {"user_id": account_id}, sort=[("created_at", -1)])
    )
    per_form = []
    for form in forms:
        form_id = str(form["_id"])
        submitted = [t for t in testimonials if t.get("form_id") == form_id]
        per_form.append({
            "form_id": form_id,
            "title": form.get("title", ""),
            "total": len(submitted),
            "approved": count_status(submitted, TestimonialStatus.APPROVED),
        })

    return {
        "total_testimonials": len(testimonials),
        "approved_testimonials": count_status(testimonials, TestimonialStatus.APPROVED),
        "pending_testimonials": count_status(testimonials, TestimonialStatus.PENDING),
        "rejected_testimonials": count_status(testimonials, TestimonialStatus.REJECTED),
        "average_rating": average_rating(testimonials),
        "rating_distribution": rating_distribution(testimonials),
        "forms": per_form,
    }


async def dashboard(account_id: str) -> Dict[str, Any]:
    testimonials = await load_testimonials(account_id)
    approved = [t for t in testimonials if t.get("status") == TestimonialStatus.APPROVED.value]
    return {
        "total_testimonials": len(testimonials),
        "pending_approval": count_status(testimonials, TestimonialStatus.PENDING),
        "average_rating": average_rating(approved),
        "recent": testimonials[:RECENT_LIMIT],
    }
