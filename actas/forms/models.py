"""
Acta data contracts.

The form models (AssignmentForm, ExitForm) are the declarative validation
schema; Document is the immutable snapshot produced by a successful
submission. Python attributes are snake_case, wire names (form fields, JSON
keys, error paths) are the camelCase aliases.
"""

import datetime as dt
import re
from typing import List, Optional, Tuple

from dateutil.parser import isoparse, parse as parse_date
from pydantic import BaseModel, ConfigDict, Field, field_validator

from actas.forms.kinds import (FIELD_MESSAGES, MSG_DATE_INVALID, MSG_DATE_TOO_OLD,
                               DATE_FORMAT)

MIN_DATE = dt.date(1900, 1, 1)
ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}($|[T ])")
_DEFAULTS = (dt.datetime(2000, 1, 1), dt.datetime(2001, 2, 2))


def coerce_date(value) -> dt.date:
    """Accept date/datetime objects, ISO text (yyyy-mm-dd) or dd/mm/yyyy text."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if value is None:
        raise ValueError(FIELD_MESSAGES["date"])
    if not isinstance(value, str):
        raise ValueError(MSG_DATE_INVALID)
    text = value.strip()
    if not text:
        raise ValueError(FIELD_MESSAGES["date"])
    if ISO_DATE.match(text):
        try:
            return isoparse(text).date()
        except (ValueError, OverflowError):
            raise ValueError(MSG_DATE_INVALID) from None
    # dateutil fills missing parts from ``default``; two defaults that differ
    # in day, month and year expose any part the text left out.
    try:
        first = parse_date(text, dayfirst=True, default=_DEFAULTS[0]).date()
        second = parse_date(text, dayfirst=True, default=_DEFAULTS[1]).date()
    except (ValueError, OverflowError):
        raise ValueError(MSG_DATE_INVALID) from None
    if first != second:
        raise ValueError(MSG_DATE_INVALID)
    return first


class LineItem(BaseModel):
    """One equipment entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    serial_number: str = Field(alias="serialNumber", min_length=1)
    description: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class ActaForm(BaseModel):
    """Header fields shared by every acta kind, plus the item list."""

    model_config = ConfigDict(populate_by_name=True)

    date: dt.date
    assigned_to: str = Field(alias="assignedTo", min_length=2)
    location: str = Field(min_length=2)
    id_number: str = Field(alias="idNumber", min_length=1)
    items: List[LineItem] = Field(min_length=1)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date_text(cls, v):
        return coerce_date(v)

    @field_validator("date")
    @classmethod
    def validate_not_before_1900(cls, v: dt.date) -> dt.date:
        if v < MIN_DATE:
            raise ValueError(MSG_DATE_TOO_OLD)
        return v


class AssignmentForm(ActaForm):
    pass


class ExitForm(ActaForm):
    origin: str = Field(alias="from", min_length=2)
    destination: str = Field(alias="to", min_length=2)


class Document(BaseModel):
    """Validated acta snapshot. Never mutated; a new submission replaces it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str
    date: dt.date
    assigned_to: str = Field(alias="assignedTo")
    location: str
    id_number: str = Field(alias="idNumber")
    origin: Optional[str] = Field(default=None, alias="from")
    destination: Optional[str] = Field(default=None, alias="to")
    items: Tuple[LineItem, ...]

    @property
    def formatted_date(self) -> str:
        return self.date.strftime(DATE_FORMAT)

    def to_wire(self) -> dict:
        """JSON-ready dict using wire names; absent route fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
