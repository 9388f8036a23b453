"""
Moderation - approve or reject pending testimonials

    pending -> approved
    pending -> rejected

Both outcomes are terminal. Only the account that owns the form a testimonial
was submitted to may moderate it.
"""
import logging
from typing import Any, Dict

from praisewall.config.database import Collections
from praisewall.database.codec import TESTIMONIAL_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.models.testimonial import TestimonialStatus

logger = logging.getLogger(__name__)

TRANSITIONS = {
    TestimonialStatus.PENDING: {TestimonialStatus.APPROVED, TestimonialStatus.REJECTED},
    TestimonialStatus.APPROVED: set(),
    TestimonialStatus.REJECTED: set(),
}


class TestimonialNotFound(Exception):
    pass


class InvalidTransition(Exception):
    def __init__(self, current: TestimonialStatus, target: TestimonialStatus):
        super().__init__(f"Cannot move a {current.value} testimonial to {target.value}")
        self.current = current
        self.target = target


def can_transition(current: TestimonialStatus, target: TestimonialStatus) -> bool:
    return target in TRANSITIONS.get(current, set())


async def set_status(testimonial_id: str, account_id: str, target: TestimonialStatus) -> Dict[str, Any]:
    testimonial = await db_ops.get_by_id(Collections.TESTIMONIALS, testimonial_id)
    if not testimonial or testimonial.get("user_id") != account_id:
        raise TestimonialNotFound(testimonial_id)

    current = TestimonialStatus(testimonial.get("status", TestimonialStatus.PENDING.value))
    if not can_transition(current, target):
        raise InvalidTransition(current, target)

    updated = await db_ops.update(Collections.TESTIMONIALS, testimonial_id, {"status": target.value})
    if updated is None:
        raise TestimonialNotFound(testimonial_id)
    logger.info("Testimonial %s %s", testimonial_id, target.value)
    return TESTIMONIAL_CODEC.decode(updated)


async def approve(testimonial_id: str, account_id: str) -> Dict[str, Any]:
    return await set_status(testimonial_id, account_id, TestimonialStatus.APPROVED)


async def reject(testimonial_id: str, account_id: str) -> Dict[str, Any]:
    return await set_status(testimonial_id, account_id, TestimonialStatus.REJECTED)
