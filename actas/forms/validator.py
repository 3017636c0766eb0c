"""
Raw form values in, Document or per-field errors out.

All-or-nothing: any failing field raises DocumentValidationError and no
Document is produced. Error keys are wire paths: "date", "items",
"items[2].quantity".
"""

import logging
from collections.abc import Mapping

from pydantic import ValidationError

from actas.forms.errors import DocumentValidationError
from actas.forms.kinds import (FIELD_MESSAGES, MSG_DATE_INVALID, MSG_QUANTITY_NOT_INT,
                               get_kind)
from actas.forms.models import AssignmentForm, Document, ExitForm

log = logging.getLogger("actas.validator")

FORM_MODELS = {
    "assignment": AssignmentForm,
    "exit": ExitForm,
}

MSG_ITEM_INVALID = "El ítem no es válido"
_NUMBER_ERRORS = ("int_parsing", "int_from_float", "int_type")


def _wire_path(loc) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += ("." if path else "") + str(part)
    return path


def _message(err: dict) -> str:
    """Spanish message for one pydantic error entry."""
    loc = err.get("loc", ())
    if err["type"] == "value_error":
        cause = err.get("ctx", {}).get("error")
        if cause is not None:
            return str(cause)
        return err["msg"].removeprefix("Value error, ")
    if loc and isinstance(loc[-1], int):
        return MSG_ITEM_INVALID
    field = str(loc[-1]) if loc else ""
    if field == "quantity" and err["type"] in _NUMBER_ERRORS:
        return MSG_QUANTITY_NOT_INT
    if field == "date" and err["type"] != "missing":
        return MSG_DATE_INVALID
    return FIELD_MESSAGES.get(field, err["msg"])


def validate_document(kind, header: dict, items) -> Document:
    """
    Validate header fields + line items for one acta kind.

    Only the fields the kind carries are read from ``header``; origin and
    destination are ignored for the assignment kind. Raises
    DocumentValidationError with every failing path.
    """
    cfg = get_kind(kind)
    if not isinstance(header, Mapping):
        header = {}
    payload = {name: header[name] for name in cfg.field_names() if name in header}
    payload["items"] = items if items is not None else []

    try:
        form = FORM_MODELS[cfg.key].model_validate(payload)
    except ValidationError as e:
        errors = {}
        for err in e.errors():
            errors.setdefault(_wire_path(err["loc"]), _message(err))
        log.debug("Validation failed for %s: %s", cfg.key, sorted(errors))
        raise DocumentValidationError(errors) from None

    return Document(kind=cfg.key, **form.model_dump())


def validate_payload(kind, data: dict) -> Document:
    """JSON API shape: header fields and an "items" list in one object.

    Anything other than a JSON object (list, string, number, null) is
    validated as an empty object, so every required field is reported.
    """
    if not isinstance(data, Mapping):
        if data is not None:
            log.debug("Non-object payload for %s: %s", kind, type(data).__name__)
        data = {}
    return validate_document(kind, data, data.get("items"))
