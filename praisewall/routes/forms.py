"""
Form routes - collection forms and their custom fields (owner only)
"""
import logging
from fastapi import APIRouter, HTTPException, status, Depends
from typing import Dict, List
from praisewall.models.form import FormCreate, FormUpdate, FormResponse
from praisewall.models.form_field import (
    FormFieldCreate, FormFieldUpdate, FormFieldResponse, FieldMoveRequest, FieldMoveResponse
)
from praisewall.database.codec import FORM_CODEC
from praisewall.database.db_operations import db_ops
from praisewall.config.database import Collections
from praisewall.services import forms as form_service
from praisewall.services import form_schema
from praisewall.services.form_schema import RejectReason, SchemaResult
from praisewall.utils.helpers import serialize_doc, serialize_docs, share_url
from praisewall.utils.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forms", tags=["Forms"])

REJECTION_STATUS = {
    RejectReason.BLANK_LABEL: status.HTTP_400_BAD_REQUEST,
    RejectReason.UNKNOWN_FIELD_TYPE: status.HTTP_400_BAD_REQUEST,
    RejectReason.NO_CHANGES: status.HTTP_400_BAD_REQUEST,
    RejectReason.FIELD_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

REJECTION_DETAIL = {
    RejectReason.BLANK_LABEL: "Field label is required",
    RejectReason.UNKNOWN_FIELD_TYPE: "Unknown field type",
    RejectReason.NO_CHANGES: "No fields to update",
    RejectReason.FIELD_NOT_FOUND: "Field not found",
}

def form_out(form: Dict) -> Dict:
    doc = serialize_doc(form)
    doc["share_url"] = share_url(doc["_id"])
    return doc

def raise_rejection(result: SchemaResult):
    raise HTTPException(
        status_code=REJECTION_STATUS[result.reason],
        detail=REJECTION_DETAIL[result.reason]
    )

async def owned_form_or_404(form_id: str, current_user: dict) -> Dict:
    form = await form_service.get_owned_form(form_id, current_user["sub"])
    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return form

@router.post("/", response_model=FormResponse, status_code=status.HTTP_201_CREATED)
async def create_form(
    form: FormCreate,
    current_user: dict = Depends(get_current_user)
):
    """Create a new collection form"""
    try:
        created_form = await form_service.create_form(current_user["sub"], form.model_dump())
    except Exception:
        logger.exception("Error creating form")
        raise HTTPException(status_code=500, detail="Error creating form")
    return form_out(created_form)

@router.get("/", response_model=List[FormResponse])
async def get_forms(current_user: dict = Depends(get_current_user)):
    """Get the account's forms, newest first"""
    forms = await db_ops.get_all(
        Collections.FORMS, {"user_id": current_user["sub"]}, sort=[("created_at", -1)]
    )
    return [form_out(form) for form in FORM_CODEC.decode_all(forms)]

@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Get form by ID"""
    return form_out(await owned_form_or_404(form_id, current_user))

@router.put("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: str,
    form_update: FormUpdate,
    current_user: dict = Depends(get_current_user)
):
    """Update form settings; is_active=false takes it off its public URL"""
    # An explicit null leaves the stored value unchanged
    update_data = {
        key: value for key, value in form_update.model_dump(exclude_unset=True).items()
        if value is not None
    }

    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )

    await owned_form_or_404(form_id, current_user)
    try:
        updated_form = await form_service.update_form(form_id, update_data)
    except Exception:
        logger.exception("Error updating form %s", form_id)
        raise HTTPException(status_code=500, detail="Error updating form")
    if not updated_form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return form_out(updated_form)

# ─── Form Builder ─────────────────────────────────────────────────────────────

@router.get("/{form_id}/fields", response_model=List[FormFieldResponse])
async def get_fields(
    form_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Custom fields in display order"""
    await owned_form_or_404(form_id, current_user)
    return serialize_docs(await form_schema.list_fields(form_id))

@router.post("/{form_id}/fields", response_model=FormFieldResponse, status_code=status.HTTP_201_CREATED)
async def add_field(
    form_id: str,
    field: FormFieldCreate,
    current_user: dict = Depends(get_current_user)
):
    """Append a custom field at the end of the form"""
    await owned_form_or_404(form_id, current_user)
    try:
        result = await form_schema.add_field(form_id, field.model_dump())
    except Exception:
        logger.exception("Error adding field to form %s", form_id)
        raise HTTPException(status_code=500, detail="Error adding field")
    if not result.accepted:
        raise_rejection(result)
    return serialize_doc(result.field)

@router.put("/{form_id}/fields/{field_id}", response_model=FormFieldResponse)
async def update_field(
    form_id: str,
    field_id: str,
    field_update: FormFieldUpdate,
    current_user: dict = Depends(get_current_user)
):
    """Edit a field in place; position is unchanged"""
    await owned_form_or_404(form_id, current_user)
    try:
        result = await form_schema.update_field(form_id, field_id, field_update.model_dump(exclude_unset=True))
    except Exception:
        logger.exception("Error updating field %s", field_id)
        raise HTTPException(status_code=500, detail="Error updating field")
    if not result.accepted:
        raise_rejection(result)
    return serialize_doc(result.field)

@router.delete("/{form_id}/fields/{field_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_field(
    form_id: str,
    field_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Delete a field"""
    await owned_form_or_404(form_id, current_user)
    try:
        result = await form_schema.delete_field(form_id, field_id)
    except Exception:
        logger.exception("Error deleting field %s", field_id)
        raise HTTPException(status_code=500, detail="Error deleting field")
    if not result.accepted:
        raise_rejection(result)

@router.post("/{form_id}/fields/{field_id}/move", response_model=FieldMoveResponse)
async def move_field(
    form_id: str,
    field_id: str,
    move: FieldMoveRequest,
    current_user: dict = Depends(get_current_user)
):
    """Move a field one position up or down; a no-op at either end"""
    await owned_form_or_404(form_id, current_user)
    try:
        result = await form_schema.move_field(form_id, field_id, move.direction)
    except Exception:
        logger.exception("Error reordering fields of form %s", form_id)
        raise HTTPException(status_code=500, detail="Error reordering fields")
    if result.reason == RejectReason.FIELD_NOT_FOUND:
        raise_rejection(result)
    return FieldMoveResponse(
        moved=result.accepted,
        reason=result.reason.value if result.reason else None,
        fields=serialize_docs(result.fields),
    )
