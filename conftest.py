"""
Shared pytest fixtures for the actas test suite.

Every test gets a fresh Flask app (and so a fresh session registry) and an
isolated assets directory with no logo unless it asks for one.
"""
import io
import os
import sys
import pytest

_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)


# ── Environment isolation ─────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """No logo, default institution, empty assets dir per test."""
    for var in ("ACTAS_LOGO_PATH", "ACTAS_INSTITUTION", "ACTAS_JSON_LOGS", "SECRET_KEY",
                "LOG_LEVEL", "PORT", "ACTAS_MAX_SESSIONS", "ACTAS_SESSION_TTL"):
        monkeypatch.delenv(var, raising=False)
    assets = tmp_path / "assets"
    assets.mkdir()
    import actas.core.paths as paths
    monkeypatch.setattr(paths, "ASSETS_DIR", str(assets))
    return assets


@pytest.fixture
def logo_file(clean_env):
    """A small PNG logo dropped into the assets dir."""
    from PIL import Image
    path = clean_env / "logo.png"
    Image.new("RGBA", (240, 160), (26, 39, 68, 255)).save(path)
    return str(path)


# ── Flask test client ─────────────────────────────────────────────────────────

@pytest.fixture
def app():
    """Create Flask app configured for testing."""
    from app import create_app
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


# ── Sample payloads ───────────────────────────────────────────────────────────

@pytest.fixture
def sample_items():
    return [
        {"serialNumber": "SN-001", "description": "Laptop Dell Latitude 5420", "quantity": "1"},
        {"serialNumber": "SN-002", "description": "Mouse inalámbrico", "quantity": "3"},
    ]


@pytest.fixture
def assignment_header():
    return {
        "date": "2024-03-05",
        "assignedTo": "Juan Pérez",
        "location": "Caracas",
        "idNumber": "V-12345678",
    }


@pytest.fixture
def exit_header(assignment_header):
    return dict(assignment_header, **{"from": "Oficina Central", "to": "Sede Valencia"})


@pytest.fixture
def assignment_payload(assignment_header, sample_items):
    return dict(assignment_header, items=sample_items)


@pytest.fixture
def exit_payload(exit_header, sample_items):
    return dict(exit_header, items=sample_items)


@pytest.fixture
def assignment_doc(assignment_header, sample_items):
    from actas.forms.validator import validate_document
    return validate_document("assignment", assignment_header, sample_items)


@pytest.fixture
def exit_doc(exit_header, sample_items):
    from actas.forms.validator import validate_document
    return validate_document("exit", exit_header, sample_items)


# ── PDF helpers ───────────────────────────────────────────────────────────────

def pdf_text(data: bytes) -> str:
    import pdfplumber
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def pdf_reader(data: bytes):
    from pypdf import PdfReader
    return PdfReader(io.BytesIO(data))


def pdf_max_x1(data: bytes) -> float:
    """Right edge of the right-most glyph on any page."""
    import pdfplumber
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return max(ch["x1"] for page in pdf.pages for ch in page.chars)
