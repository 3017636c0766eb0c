"""
Acta kinds — one declarative configuration per document kind.

Both actas share the same engine; everything that differs between them
(extra header fields, titles, legal boilerplate, page geometry, filename)
lives here. ACTA_KINDS is a closed set: "assignment" and "exit".
"""

from dataclasses import dataclass
from typing import Tuple

from actas.forms.errors import UnknownKindError

# ═══════════════════════════════════════════════════════════════════════════════
# PAGE GEOMETRY
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PageConfig:
    """Export geometry. Margins are [top, right, bottom, left] in mm."""
    margins_mm: Tuple[float, float, float, float]
    page_size: str = "letter"
    orientation: str = "landscape"
    image_scale: int = 2
    image_quality: float = 0.98

    def css_margin(self) -> str:
        """Margins in CSS shorthand order (top right bottom left)."""
        return " ".join(f"{m:g}mm" for m in self.margins_mm)


# ═══════════════════════════════════════════════════════════════════════════════
# SHARED LABELS
# ═══════════════════════════════════════════════════════════════════════════════

ITEM_COLUMNS = ("SERIE O REFERENCIA DEL EQUIPO", "DESCRIPCIÓN", "CANTIDAD")
ITEM_FIELDS = (
    ("serialNumber", "Serie o Referencia", "Número de serie"),
    ("description", "Descripción", "Descripción del equipo"),
    ("quantity", "Cantidad", "1"),
)
SIGNATURES = ("Quien Entrega", "Quien recibe", "Responsable del Área")
LOGO_ALT = "Logo MODO"
DATE_FORMAT = "%d/%m/%Y"        # on-screen and printed dates, dd/MM/yyyy
FILENAME_DATE_FORMAT = "%d-%m-%Y"
MIN_DATE_ISO = "1900-01-01"

BASE_HEADER_FIELDS = (
    ("assignedTo", "Persona Asignada", "Nombre completo"),
    ("location", "Lugar", "Ubicación"),
    ("idNumber", "Cédula de Identidad", "Número de cédula"),
)
ROUTE_HEADER_FIELDS = (
    ("from", "Desde (Origen)", "Origen"),
    ("to", "Hacia (Destino)", "Destino"),
)

# Spanish validation messages, keyed by wire field name
FIELD_MESSAGES = {
    "date": "La fecha es requerida",
    "assignedTo": "El nombre debe tener al menos 2 caracteres",
    "location": "El lugar debe tener al menos 2 caracteres",
    "idNumber": "El número de cédula es requerido",
    "from": "El origen debe tener al menos 2 caracteres",
    "to": "El destino debe tener al menos 2 caracteres",
    "serialNumber": "El número de serie es requerido",
    "description": "La descripción es requerida",
    "quantity": "La cantidad debe ser al menos 1",
    "items": "Debe haber al menos un ítem",
}
MSG_DATE_INVALID = "La fecha no es válida"
MSG_DATE_TOO_OLD = "La fecha debe ser igual o posterior al 01/01/1900"
MSG_QUANTITY_NOT_INT = "La cantidad debe ser un número entero"
MSG_NOTHING_TO_EXPORT = "No hay un acta generada para exportar"
MSG_EXPORT_IN_PROGRESS = "Ya hay una exportación en curso"

# ═══════════════════════════════════════════════════════════════════════════════
# LEGAL BOILERPLATE
# ═══════════════════════════════════════════════════════════════════════════════

ASSIGNMENT_LEGAL = (
    "Yo, {assigned_to} titular de la cédula de identidad No. {id_number}, "
    "declaro haber recibido mediante la presente Acta, los equipos mencionados "
    "en este documento en perfectas condiciones de operatividad, los cuales me "
    "comprometo a cuidar y utilizar únicamente en las actividades inherentes a "
    "las funciones que me sean asignadas, de igual manera a devolverlos cuando "
    "me sean requeridos, en las mismas condiciones de operatividad en que los "
    "estoy recibiendo, a tales efectos autorizo a la Corporación Modo Caracas a "
    "que me descuente los equipos que me fueron asignados en caso de no "
    "devolverlos al momento que me sean requeridos si no existiere una causa "
    "comprobable que lo justifique."
)

EXIT_LEGAL = (
    "Yo, {assigned_to} portador de la cédula de identidad {id_number} autorizo "
    "la salida de los equipos mencionados en este documento desde {origin} "
    "hacia {destination} y con mi firma doy fe de que la persona asignada se "
    "hará cargo del traslado y cumplirá responsablemente con esta tarea."
)


# ═══════════════════════════════════════════════════════════════════════════════
# KIND CONFIGS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ActaKind:
    key: str
    tab_label: str
    heading: str
    title: str
    submit_label: str
    filename_prefix: str
    header_fields: Tuple[Tuple[str, str, str], ...]
    legal_template: str
    page: PageConfig
    blank_rows: int = 0

    @property
    def has_route(self) -> bool:
        """Exit actas carry origin/destination."""
        return any(name == "from" for name, _, _ in self.header_fields)

    def field_names(self) -> Tuple[str, ...]:
        return ("date",) + tuple(name for name, _, _ in self.header_fields)


ASSIGNMENT = ActaKind(
    key="assignment",
    tab_label="Acta de Asignacion de Equipos",
    heading="Acta de Entrega de Equipos y Herramientas",
    title="ACTA DE ENTREGA DE EQUIPOS Y HERRAMIENTAS",
    submit_label="Generar Acta de Entrega",
    filename_prefix="acta_entrega",
    header_fields=BASE_HEADER_FIELDS,
    legal_template=ASSIGNMENT_LEGAL,
    page=PageConfig(margins_mm=(15, 20, 16, 21)),
)

EXIT = ActaKind(
    key="exit",
    tab_label="Acta de Salida de Equipos",
    heading="Acta de Salida de Equipos y Herramientas",
    title="ACTA DE SALIDA DE EQUIPOS Y HERRAMIENTAS",
    submit_label="Generar Acta de Salida",
    filename_prefix="acta_salida",
    header_fields=BASE_HEADER_FIELDS + ROUTE_HEADER_FIELDS,
    legal_template=EXIT_LEGAL,
    page=PageConfig(margins_mm=(20, 23, 19, 24)),
    blank_rows=1,
)

ACTA_KINDS = {
    ASSIGNMENT.key: ASSIGNMENT,
    EXIT.key: EXIT,
}


def get_kind(kind) -> ActaKind:
    """Resolve a kind key (or pass an ActaKind through)."""
    if isinstance(kind, ActaKind):
        return kind
    cfg = ACTA_KINDS.get(kind)
    if cfg is None:
        raise UnknownKindError(kind)
    return cfg
