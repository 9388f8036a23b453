"""
Render strategies for custom form fields

Each known field_type maps to a FieldRenderer that knows the input widget the
public form shows and how a raw answer is coerced into its stored shape:

    text, email   single-line string   -> str
    textarea      multi-line string    -> str
    select        one of options       -> str
    checkbox      subset of options    -> list of str
    rating        integer 1-5          -> int

Fields with an unknown field_type are skipped when rendering and when
collecting answers, so one malformed field never blocks the rest of a form.
"""
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

RATING_MIN = 1
RATING_MAX = 5


class AnswerInvalid(ValueError):
    """Raised by a renderer when an answer cannot take the field's stored shape"""


class FieldRenderer:
    field_type = ""
    input = ""

    def widget(self, field: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "field_id": str(field["_id"]),
            "field_type": self.field_type,
            "input": self.input,
            "label": field.get("label", ""),
            "placeholder": field.get("placeholder") or "",
            "required": bool(field.get("required")),
            "options": [],
        }

    def coerce(self, field: Dict[str, Any], raw: Any) -> Any:
        if isinstance(raw, (list, dict)):
            raise AnswerInvalid(f"{field.get('label')} must be a single value")
        return str(raw)


class LineRenderer(FieldRenderer):
    def __init__(self, field_type: str, input_kind: str):
        self.field_type = field_type
        self.input = input_kind


class SelectRenderer(FieldRenderer):
    field_type = "select"
    input = "select"

    def widget(self, field):
        widget = super().widget(field)
        widget["options"] = list(field.get("options") or [])
        return widget

    def coerce(self, field, raw):
        value = super().coerce(field, raw)
        options = field.get("options") or []
        if value and options and value not in options:
            raise AnswerInvalid(f"{field.get('label')}: '{value}' is not one of the available options")
        return value


class CheckboxRenderer(FieldRenderer):
    field_type = "checkbox"
    input = "checkbox_group"

    def widget(self, field):
        widget = super().widget(field)
        widget["options"] = list(field.get("options") or [])
        return widget

    def coerce(self, field, raw):
        if isinstance(raw, str):
            values = [raw] if raw else []
        elif isinstance(raw, (list, tuple)):
            values = [str(item) for item in raw]
        else:
            raise AnswerInvalid(f"{field.get('label')} must be a list of options")
        options = field.get("options") or []
        unknown = [value for value in values if options and value not in options]
        if unknown:
            raise AnswerInvalid(f"{field.get('label')}: '{unknown[0]}' is not one of the available options")
        return values


class RatingRenderer(FieldRenderer):
    field_type = "rating"
    input = "stars"

    def widget(self, field):
        widget = super().widget(field)
        widget.update({"min": RATING_MIN, "max": RATING_MAX})
        return widget

    def coerce(self, field, raw):
        if isinstance(raw, bool):
            raise AnswerInvalid(f"{field.get('label')} must be a rating from {RATING_MIN} to {RATING_MAX}")
        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError):
            raise AnswerInvalid(f"{field.get('label')} must be a rating from {RATING_MIN} to {RATING_MAX}")
        if not RATING_MIN <= value <= RATING_MAX:
            raise AnswerInvalid(f"{field.get('label')} must be a rating from {RATING_MIN} to {RATING_MAX}")
        return value


RENDERERS: Dict[str, FieldRenderer] = {
    renderer.field_type: renderer
    for renderer in (
        LineRenderer("text", "text"),
        LineRenderer("email", "email"),
        LineRenderer("textarea", "textarea"),
        SelectRenderer(),
        CheckboxRenderer(),
        RatingRenderer(),
    )
}


def get_renderer(field_type: Optional[str]) -> Optional[FieldRenderer]:
    return RENDERERS.get(field_type or "")


def is_known_type(field_type: Optional[str]) -> bool:
    return get_renderer(field_type) is not None


def render_fields(fields: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Widgets for fields already sorted in display order"""
    widgets = []
    for field in fields:
        renderer = get_renderer(field.get("field_type"))
        if renderer is None:
            logger.warning("Skipping field %s with unknown type %r", field.get("_id"), field.get("field_type"))
            continue
        widgets.append(renderer.widget(field))
    return widgets
