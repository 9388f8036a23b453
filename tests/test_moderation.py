import pytest

from conftest import submission
from praisewall.models.testimonial import TestimonialStatus as Status
from praisewall.services import moderation
from praisewall.services.submission_pipeline import submit_testimonial


@pytest.mark.parametrize("current,target,allowed", [
    (Status.PENDING, Status.APPROVED, True),
    (Status.PENDING, Status.REJECTED, True),
    (Status.APPROVED, Status.PENDING, False),
    (Status.APPROVED, Status.REJECTED, False),
    (Status.REJECTED, Status.APPROVED, False),
    (Status.REJECTED, Status.PENDING, False),
])
def test_transitions(current, target, allowed):
    assert moderation.can_transition(current, target) is allowed


async def test_approve_pending(form):
    created = await submit_testimonial(form, submission())

    updated = await moderation.approve(str(created["_id"]), "account-1")

    assert updated["status"] == "approved"


async def test_rejected_is_terminal(form):
    created = await submit_testimonial(form, submission())
    await moderation.reject(str(created["_id"]), "account-1")

    with pytest.raises(moderation.InvalidTransition):
        await moderation.approve(str(created["_id"]), "account-1")


async def test_only_the_owner_can_moderate(form):
    created = await submit_testimonial(form, submission())

    with pytest.raises(moderation.TestimonialNotFound):
        await moderation.approve(str(created["_id"]), "someone-else")


async def test_unknown_testimonial():
    with pytest.raises(moderation.TestimonialNotFound):
        await moderation.reject("not-an-id", "account-1")
