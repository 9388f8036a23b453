"""
Submission Pipeline - validate, assemble and persist one testimonial

Validation runs entirely before the store is touched and stops at the first
problem, which is reported as a single SubmissionRejected message:

1. built-in required fields (name, email, content), in that order
2. custom required fields, in display order
3. format checks (email address, media policy, rating range, answer shapes)

Assembly combines the built-in attributes with a {field_id: answer} mapping
of every custom answer that was given; absent answers are left out rather
than stored as null. Status is "pending" when the form requires approval and
"approved" otherwise.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from email_validator import validate_email, EmailNotValidError

from praisewall.config.database import Collections
from praisewall.database.codec import TESTIMONIAL_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.models.testimonial import TestimonialStatus
from praisewall.services.field_renderers import AnswerInvalid, RATING_MAX, RATING_MIN, get_renderer
from praisewall.services.form_schema import list_fields

logger = logging.getLogger(__name__)

BUILTIN_REQUIRED = (
    ("name", "Your Name"),
    ("email", "Email Address"),
    ("content", "Your Testimonial"),
)


class SubmissionRejected(Exception):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return str(value).strip() == ""


def required_message(label: str) -> str:
    return f"{label} is required"


def check_builtin_fields(payload: Dict[str, Any]) -> None:
    for key, label in BUILTIN_REQUIRED:
        if is_blank(payload.get(key)):
            raise SubmissionRejected(required_message(label), key)


def check_custom_fields(fields: List[Dict[str, Any]], answers: Dict[str, Any]) -> None:
    for field in fields:
        if not field.get("required") or get_renderer(field.get("field_type")) is None:
            continue
        if is_blank(answers.get(str(field["_id"]))):
            raise SubmissionRejected(required_message(field.get("label")), str(field["_id"]))


def check_formats(form: Dict[str, Any], payload: Dict[str, Any]) -> None:
    try:
        validate_email(payload["email"].strip(), check_deliverability=False)
    except EmailNotValidError:
        raise SubmissionRejected("Please enter a valid email address", "email")
    if payload.get("video_url") and not form.get("allow_video"):
        raise SubmissionRejected("This form does not accept video testimonials", "video_url")
    rating = payload.get("rating")
    if rating is not None and not RATING_MIN <= rating <= RATING_MAX:
        raise SubmissionRejected(f"Rating must be between {RATING_MIN} and {RATING_MAX}", "rating")


def validate_submission(form: Dict[str, Any], fields: List[Dict[str, Any]], payload: Dict[str, Any]) -> None:
    check_builtin_fields(payload)
    check_custom_fields(fields, payload.get("custom_fields") or {})
    check_formats(form, payload)


def collect_answers(fields: List[Dict[str, Any]], answers: Dict[str, Any]) -> Dict[str, Any]:
    """Stored-shape answers for known fields that were answered.

    Answers for ids outside the schema and for unknown field types are
    dropped. Optional fields left empty are omitted too.
    """
    collected = {}
    for field in fields:
        field_id = str(field["_id"])
        renderer = get_renderer(field.get("field_type"))
        if renderer is None or field_id not in answers:
            continue
        raw = answers[field_id]
        if raw is None:
            continue
        if not field.get("required") and is_blank(raw):
            continue
        try:
            collected[field_id] = renderer.coerce(field, raw)
        except AnswerInvalid as e:
            raise SubmissionRejected(str(e), field_id)
    return collected


def initial_status(form: Dict[str, Any]) -> TestimonialStatus:
    return TestimonialStatus.PENDING if form.get("require_approval") else TestimonialStatus.APPROVED


def assemble_record(
    form: Dict[str, Any],
    payload: Dict[str, Any],
    answers: Dict[str, Any],
    submitted_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    submitted_at = submitted_at or datetime.utcnow()
    return {
        "user_id": form["user_id"],
        "form_id": str(form["_id"]),
        "name": payload["name"].strip(),
        "email": payload["email"].strip(),
        "company": (payload.get("company") or "").strip(),
        "rating": payload.get("rating") or RATING_MAX,
        "content": payload["content"].strip(),
        "image_url": payload.get("image_url") or "",
        "video_url": payload.get("video_url") or "",
        "custom_fields": answers,
        "status": initial_status(form).value,
        "created_at": submitted_at,
        "updated_at": submitted_at,
    }


async def submit_testimonial(form: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
    """Run the whole pipeline for one public submission.

    Raises SubmissionRejected before any write when validation fails. Store
    errors propagate to the caller untouched; nothing is retried.
    """
    fields = await list_fields(str(form["_id"]))
    validate_submission(form, fields, payload)
    answers = collect_answers(fields, payload.get("custom_fields") or {})
    record = assemble_record(form, payload, answers)

    created = await db_ops.create(Collections.TESTIMONIALS, TESTIMONIAL_CODEC.encode(record))
    logger.info("New testimonial %s on form %s (%s)", created["_id"], record["form_id"], record["status"])
    return TESTIMONIAL_CODEC.decode(created)
