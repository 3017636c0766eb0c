"""
Actas Dashboard
Two tabs (assignment / exit), each a server-side FormSession: edit → submit →
preview → print or download. Plus a small stateless JSON API.
"""
import io
import time
import logging

from flask import (Blueprint, current_app, request, redirect, url_for, render_template_string,
                   send_file, jsonify, flash, abort, session as browser_session)

from actas.api.templates import BASE_CSS, PAGE_HOME
from actas.core.config import get_int
from actas.core.paths import find_logo
from actas.forms.errors import DocumentValidationError, UnknownItemError, UnknownKindError
from actas.forms.exporter import ActaExporter
from actas.forms.kinds import ACTA_KINDS, ITEM_FIELDS, MIN_DATE_ISO, get_kind
from actas.forms.print_view import ACTA_CSS, render_preview_html
from actas.forms.renderer import export_filename
from actas.forms.session import SessionRegistry
from actas.forms.validator import validate_payload

log = logging.getLogger("actas.api")

bp = Blueprint("actas", __name__)

LOGO_URL = "/acta/logo"
DEFAULT_TAB = "assignment"


# ── Request-level structured logging ────────────────────────────────────────
@bp.before_app_request
def _log_request_start():
    request._start_time = time.time()


@bp.after_app_request
def _log_request_end(response):
    if hasattr(request, "_start_time"):
        duration_ms = round((time.time() - request._start_time) * 1000, 1)
        # Skip health spam
        if request.path != "/api/health":
            log.info("%s %s → %d (%.0fms)",
                     request.method, request.path, response.status_code, duration_ms,
                     extra={"route": request.path, "method": request.method,
                            "status": response.status_code, "duration_ms": duration_ms})
    return response


@bp.app_errorhandler(UnknownKindError)
def _unknown_kind(e):
    log.info("Unknown kind requested: %r", e.kind)
    if request.path.startswith("/api/"):
        return jsonify({"ok": False, "error": "unknown_kind", "message": str(e)}), 404
    return str(e), 404


# ═══════════════════════════════════════════════════════════════════════
# Session Layer
# ═══════════════════════════════════════════════════════════════════════
def _make_exporter():
    return ActaExporter(logo_url=LOGO_URL)


def sessions() -> SessionRegistry:
    """The app's in-memory FormSession registry."""
    registry = current_app.extensions.get("actas_sessions")
    if registry is None:
        registry = SessionRegistry(exporter_factory=_make_exporter,
                                   max_sessions=get_int("max_sessions"),
                                   ttl=get_int("session_ttl"))
        current_app.extensions["actas_sessions"] = registry
    return registry


def _view_id() -> str:
    if "view_id" not in browser_session:
        browser_session["view_id"] = SessionRegistry.new_id()
    return browser_session["view_id"]


def form_session(kind):
    return sessions().get(_view_id(), kind)


def _back(kind):
    return redirect(url_for("actas.home", tab=get_kind(kind).key))


def _wants_json() -> bool:
    return (request.headers.get("X-Requested-With") == "fetch"
            or request.accept_mimetypes.best == "application/json")


def _pdf_response(pdf):
    return send_file(io.BytesIO(pdf.data), mimetype="application/pdf",
                     as_attachment=True, download_name=pdf.filename)


# ═══════════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════════
@bp.route("/")
def home():
    tab = request.args.get("tab", DEFAULT_TAB)
    if tab not in ACTA_KINDS:
        tab = DEFAULT_TAB
    s = form_session(tab)
    preview = None
    if s.visual is not None:
        preview = render_preview_html(s.visual, s.exporter.logo_src())
    return render_template_string(
        PAGE_HOME, base_css=BASE_CSS, acta_css=ACTA_CSS,
        kinds=ACTA_KINDS, kind=s.kind, s=s, items=list(s.items),
        item_fields=ITEM_FIELDS, min_date=MIN_DATE_ISO, preview=preview)


@bp.route("/acta/<kind>/submit", methods=["POST"])
def submit(kind):
    s = form_session(kind)
    s.apply_form(request.form)
    if s.submit():
        flash("Acta generada", "success")
    else:
        flash(f"Revise el formulario: {len(s.errors)} campo(s) con errores", "error")
    return _back(kind)


@bp.route("/acta/<kind>/items", methods=["POST"])
def add_item(kind):
    s = form_session(kind)
    s.apply_form(request.form)
    s.add_item()
    return _back(kind)


@bp.route("/acta/<kind>/items/<item_id>/remove", methods=["POST"])
def remove_item(kind, item_id):
    s = form_session(kind)
    s.apply_form(request.form)
    try:
        s.remove_item_id(item_id)
    except UnknownItemError:
        log.info("%s: remove of stale item %s ignored", s.kind.key, item_id)
    return _back(kind)


@bp.route("/acta/<kind>/pdf")
def download_pdf(kind):
    s = form_session(kind)
    result = s.export_pdf()
    if not result["ok"]:
        if _wants_json():
            return jsonify(result), 409
        flash(result["message"], "error")
        return _back(kind)
    return _pdf_response(result["file"])


@bp.route("/acta/<kind>/print")
def print_acta(kind):
    s = form_session(kind)
    result = s.print_view()
    if not result["ok"]:
        if _wants_json():
            return jsonify(result), 409
        flash(result["message"], "error")
        return _back(kind)
    return result["html"]


@bp.route("/acta/logo")
def logo():
    path = find_logo()
    if not path:
        abort(404)
    return send_file(path)


# ═══════════════════════════════════════════════════════════════════════
# JSON API
# ═══════════════════════════════════════════════════════════════════════
@bp.route("/api/actas/<kind>/validate", methods=["POST"])
def api_validate(kind):
    get_kind(kind)
    try:
        document = validate_payload(kind, request.get_json(silent=True))
    except DocumentValidationError as e:
        return jsonify({"ok": False, "errors": e.errors}), 400
    return jsonify({"ok": True, "document": document.to_wire(),
                    "filename": export_filename(document)})


@bp.route("/api/actas/<kind>/pdf", methods=["POST"])
def api_pdf(kind):
    """Stateless render + export: JSON acta in, PDF out."""
    get_kind(kind)
    try:
        document = validate_payload(kind, request.get_json(silent=True))
    except DocumentValidationError as e:
        return jsonify({"ok": False, "errors": e.errors}), 400
    exporter = _make_exporter()
    try:
        pdf = exporter.export(exporter.render(document))
    except Exception:
        log.exception("API export failed for %s", kind)
        raise
    return _pdf_response(pdf)


@bp.route("/api/health")
def api_health():
    return jsonify({"status": "ok", "kinds": list(ACTA_KINDS)})
