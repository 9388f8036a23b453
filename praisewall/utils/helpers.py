"""
Helper utility functions
"""
from bson import ObjectId
from typing import Any, Dict, List, Optional
from datetime import datetime
import pytz

from praisewall.config.settings import settings

OUTPUT_TZ = pytz.timezone(settings.TIMEZONE)

def localize(value: datetime) -> str:
    """Render a stored datetime (naive values are UTC) in the configured timezone"""
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.astimezone(OUTPUT_TZ).isoformat()

def serialize_doc(doc: Optional[Dict]) -> Optional[Dict]:
    """Convert MongoDB document to JSON-serializable format"""
    if doc is None:
        return None

    doc = dict(doc)
    for key, value in doc.items():
        doc[key] = _serialize_value(value)
    return doc

def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return localize(value)
    if isinstance(value, dict):
        return serialize_doc(value)
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    return value

def serialize_docs(docs: List[Dict]) -> List[Dict]:
    """Convert list of MongoDB documents to JSON-serializable format"""
    return [serialize_doc(doc) for doc in docs]

def clamp_limit(limit: Optional[int]) -> int:
    """Apply the configured page size bounds"""
    if not limit or limit < 1:
        return settings.DEFAULT_PAGE_SIZE
    return min(limit, settings.MAX_PAGE_SIZE)

def share_url(form_id: str) -> str:
    """Public link a form owner hands out to customers"""
    return f"{settings.FRONTEND_BASE_URL.rstrip('/')}/form/{form_id}"
