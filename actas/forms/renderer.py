"""
Template renderer — Document → VisualDocument.

A pure mapping onto the fixed acta layout: header block, fact table,
line-item table, legal paragraph and three signature blocks. The same
VisualDocument feeds the on-screen preview, the print page and the PDF.
"""

import re
from dataclasses import dataclass
from string import Formatter
from typing import Optional, Tuple

from actas.core.config import get_setting
from actas.forms.kinds import (FILENAME_DATE_FORMAT, ITEM_COLUMNS, LOGO_ALT, SIGNATURES,
                               PageConfig, get_kind)
from actas.forms.models import Document


@dataclass(frozen=True)
class VisualDocument:
    kind: str
    title: str
    institution: str
    logo_alt: str
    facts: Tuple[Tuple[str, str], ...]
    columns: Tuple[str, ...]
    rows: Tuple[Tuple[str, str, str], ...]
    blank_rows: int
    legal_segments: Tuple[Tuple[str, bool], ...]
    signatures: Tuple[str, ...]
    page: PageConfig
    filename: str

    @property
    def legal_text(self) -> str:
        return "".join(text for text, _ in self.legal_segments)


def export_filename(document: Document) -> str:
    """acta_{entrega|salida}_{assignee, whitespace runs → _}_{dd-MM-yyyy}.pdf"""
    cfg = get_kind(document.kind)
    name = re.sub(r"\s+", "_", document.assigned_to)
    return f"{cfg.filename_prefix}_{name}_{document.date.strftime(FILENAME_DATE_FORMAT)}.pdf"


def legal_segments(template: str, values: dict) -> Tuple[Tuple[str, bool], ...]:
    """Split a legal template into (text, emphasized) runs; interpolated values are emphasized."""
    segments = []
    for literal, field, _spec, _conv in Formatter().parse(template):
        if literal:
            segments.append((literal, False))
        if field is not None:
            segments.append((str(values.get(field) or ""), True))
    return tuple(segments)


def _facts(document: Document) -> Tuple[Tuple[str, str], ...]:
    facts = [
        ("Fecha:", document.formatted_date),
        ("Persona Asignada:", document.assigned_to),
        ("Lugar:", document.location),
    ]
    if get_kind(document.kind).has_route:
        facts.append(("Desde:", document.origin or ""))
        facts.append(("Hacia:", document.destination or ""))
    return tuple(facts)


def render_document(document: Document, institution: Optional[str] = None) -> VisualDocument:
    cfg = get_kind(document.kind)
    values = {
        "assigned_to": document.assigned_to,
        "id_number": document.id_number,
        "origin": document.origin,
        "destination": document.destination,
    }
    return VisualDocument(
        kind=cfg.key,
        title=cfg.title,
        institution=institution if institution is not None else get_setting("institution"),
        logo_alt=LOGO_ALT,
        facts=_facts(document),
        columns=ITEM_COLUMNS,
        rows=tuple((it.serial_number, it.description, str(it.quantity))
                   for it in document.items),
        blank_rows=cfg.blank_rows,
        legal_segments=legal_segments(cfg.legal_template, values),
        signatures=SIGNATURES,
        page=cfg.page,
        filename=export_filename(document),
    )
