from conftest import submission
from praisewall.services import analytics, moderation
from praisewall.services.submission_pipeline import submit_testimonial


def test_average_rating_rounds_to_one_decimal():
    assert analytics.average_rating([{"rating": 5}, {"rating": 4}, {"rating": 4}]) == 4.3
    assert analytics.average_rating([]) == 0


async def test_account_analytics_counts_by_status(form, open_form):
    first = await submit_testimonial(form, submission(rating=3))
    second = await submit_testimonial(form, submission(rating=4))
    await submit_testimonial(open_form, submission(rating=5))
    await moderation.reject(str(first["_id"]), "account-1")

    data = await analytics.account_analytics("account-1")

    assert data["total_testimonials"] == 3
    assert data["approved_testimonials"] == 1
    assert data["pending_testimonials"] == 1
    assert data["rejected_testimonials"] == 1
    assert data["average_rating"] == 4.0
    assert data["rating_distribution"] == {"1": 0, "2": 0, "3": 1, "4": 1, "5": 1}
    per_form = {f["form_id"]: f for f in data["forms"]}
    assert per_form[str(form["_id"])]["total"] == 2
    assert per_form[str(open_form["_id"])]["approved"] == 1
    assert second["status"] == "pending"


async def test_dashboard_averages_approved_only(form, open_form):
    await submit_testimonial(form, submission(rating=1))
    for rating in (4, 5):
        await submit_testimonial(open_form, submission(rating=rating))

    data = await analytics.dashboard("account-1")

    assert data["total_testimonials"] == 3
    assert data["pending_approval"] == 1
    assert data["average_rating"] == 4.5
    assert len(data["recent"]) == 3
