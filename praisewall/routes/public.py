"""
Public routes - no session required

These back the shareable /form/{formId} page and the embeddable wall.
"""
import logging
from typing import List
from fastapi import APIRouter, HTTPException, status, UploadFile, File, Query
from fastapi.concurrency import run_in_threadpool
from praisewall.config.database import Collections
from praisewall.config.settings import settings
from praisewall.database.codec import TESTIMONIAL_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.models.form import PublicFormResponse
from praisewall.models.testimonial import SubmissionReceipt, TestimonialSubmit, UploadResponse, WallEntry
from praisewall.services import forms as form_service
from praisewall.services.field_renderers import render_fields
from praisewall.services.form_schema import list_fields
from praisewall.services.storage import BlobStorage, MEDIA_KINDS, StorageError, media_path
from praisewall.services.submission_pipeline import SubmissionRejected, submit_testimonial
from praisewall.utils.helpers import serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public", tags=["Public"])

async def active_form_or_404(form_id: str):
    form = await form_service.get_active_form(form_id)
    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return form

@router.get("/forms/{form_id}", response_model=PublicFormResponse)
async def get_public_form(form_id: str):
    """Form branding plus the widgets to render for its custom fields"""
    form = await active_form_or_404(form_id)
    fields = await list_fields(form_id)
    return PublicFormResponse(
        id=str(form["_id"]),
        title=form["title"],
        description=form.get("description") or "",
        questions=form.get("questions") or [],
        allow_video=form["allow_video"],
        require_approval=form["require_approval"],
        brand_color=form.get("brand_color") or settings.DEFAULT_BRAND_COLOR,
        company_name=form.get("company_name") or "",
        company_logo=form.get("company_logo") or "",
        fields=render_fields(fields),
    )

@router.post("/forms/{form_id}/uploads", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_media(
    form_id: str,
    kind: str = Query("image"),
    file: UploadFile = File(...),
):
    """Store an image or video for a testimonial that is about to be submitted"""
    form = await active_form_or_404(form_id)
    if kind not in MEDIA_KINDS:
        raise HTTPException(status_code=400, detail="Upload kind must be image or video")
    if kind == "video" and not form.get("allow_video"):
        raise HTTPException(status_code=400, detail="This form does not accept video testimonials")
    if file.size is not None and file.size > settings.MAX_UPLOAD_MB * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File is larger than {settings.MAX_UPLOAD_MB} MB")

    try:
        stored = await run_in_threadpool(
            BlobStorage().upload, file.file, media_path(kind, file.filename), upsert=True
        )
    except (StorageError, OSError):
        logger.exception("Error uploading %s for form %s", kind, form_id)
        raise HTTPException(status_code=500, detail="Error uploading file. Please try again.")
    return stored

@router.post("/forms/{form_id}/submit", response_model=SubmissionReceipt, status_code=status.HTTP_201_CREATED)
async def submit_form(form_id: str, submission: TestimonialSubmit):
    """Submit a testimonial"""
    form = await active_form_or_404(form_id)
    try:
        created = await submit_testimonial(form, submission.model_dump())
    except SubmissionRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception:
        logger.exception("Error submitting testimonial for form %s", form_id)
        raise HTTPException(status_code=500, detail="Error submitting testimonial. Please try again.")

    message = "Your testimonial has been submitted successfully."
    if form.get("require_approval"):
        message += " It will be reviewed before being published."
    return SubmissionReceipt(id=str(created["_id"]), status=created["status"], message=message)

@router.get("/wall/{account_id}", response_model=List[WallEntry])
async def get_public_wall(account_id: str, limit: int = Query(50, ge=1, le=200)):
    """Approved testimonials of one account, newest first"""
    testimonials = await db_ops.get_all(
        Collections.TESTIMONIALS,
        {"user_id": account_id, "status": "approved"},
        limit=limit,
        sort=[("created_at", -1)],
    )
    return serialize_docs(TESTIMONIAL_CODEC.decode_all(testimonials))
