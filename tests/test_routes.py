"""
Integration tests for the actas blueprint routes.

Walks the real flow through the Flask test client: page → edit → submit →
preview → print / download, plus the JSON API.
"""
import re
import pytest

from conftest import pdf_reader
from actas.forms.kinds import MSG_NOTHING_TO_EXPORT

MM = 72 / 25.4


def _item_ids(client, tab="assignment"):
    html = client.get(f"/?tab={tab}").get_data(as_text=True)
    return re.findall(r'name="items-([0-9a-f]{8})-serialNumber"', html)


def _form(header, items_by_id):
    data = dict(header)
    for item_id, item in items_by_id.items():
        for field, value in item.items():
            data[f"items-{item_id}-{field}"] = value
    return data


def _submit_two_items(client, header, items, kind="assignment"):
    first = _item_ids(client, kind)[0]
    client.post(f"/acta/{kind}/items", data=_form(header, {first: items[0]}))
    ids = _item_ids(client, kind)
    assert len(ids) == 2
    return client.post(f"/acta/{kind}/submit", data=_form(header, dict(zip(ids, items))),
                       follow_redirects=True)


# ═══════════════════════════════════════════════════════════════════════════════
# HOME PAGE
# ═══════════════════════════════════════════════════════════════════════════════

class TestHomePage:

    def test_loads(self, client):
        r = client.get("/")
        assert r.status_code == 200
        html = r.get_data(as_text=True)
        assert "Actas Soporte técnico MoDo" in html
        assert "Acta de Asignacion de Equipos" in html
        assert "Acta de Salida de Equipos" in html

    def test_assignment_form(self, client):
        html = client.get("/").get_data(as_text=True)
        assert "Generar Acta de Entrega" in html
        assert "Agregar Equipo" in html
        assert 'min="1900-01-01"' in html
        assert 'name="from"' not in html
        assert "Vista Previa" not in html

    def test_exit_tab(self, client):
        html = client.get("/?tab=exit").get_data(as_text=True)
        assert "Desde (Origen)" in html and "Hacia (Destino)" in html
        assert "Generar Acta de Salida" in html

    def test_unknown_tab_falls_back(self, client):
        html = client.get("/?tab=loan").get_data(as_text=True)
        assert "Generar Acta de Entrega" in html

    def test_one_item_row(self, client):
        assert len(_item_ids(client)) == 1


# ═══════════════════════════════════════════════════════════════════════════════
# EDITING
# ═══════════════════════════════════════════════════════════════════════════════

class TestEditing:

    def test_add_item_keeps_edits(self, client):
        first = _item_ids(client)[0]
        r = client.post("/acta/assignment/items",
                        data={"assignedTo": "Ana Ruiz", f"items-{first}-serialNumber": "X-1"})
        assert r.status_code == 302
        html = client.get("/").get_data(as_text=True)
        assert len(_item_ids(client)) == 2
        assert 'value="Ana Ruiz"' in html
        assert 'value="X-1"' in html

    def test_remove_item(self, client):
        first = _item_ids(client)[0]
        client.post("/acta/assignment/items", data={})
        ids = _item_ids(client)
        client.post(f"/acta/assignment/items/{ids[1]}/remove", data={})
        assert _item_ids(client) == [first]

    def test_remove_last_item_noop(self, client):
        only = _item_ids(client)[0]
        r = client.post(f"/acta/assignment/items/{only}/remove", data={})
        assert r.status_code == 302
        assert _item_ids(client) == [only]

    def test_remove_stale_item(self, client):
        r = client.post("/acta/assignment/items/deadbeef/remove", data={})
        assert r.status_code == 302

    def test_tabs_independent(self, client):
        client.post("/acta/exit/items", data={})
        assert len(_item_ids(client, "exit")) == 2
        assert len(_item_ids(client, "assignment")) == 1

    def test_sessions_per_browser(self, app):
        with app.test_client() as a, app.test_client() as b:
            a.post("/acta/assignment/items", data={})
            assert len(_item_ids(a)) == 2
            assert len(_item_ids(b)) == 1


# ═══════════════════════════════════════════════════════════════════════════════
# SUBMIT
# ═══════════════════════════════════════════════════════════════════════════════

class TestSubmit:

    def test_errors_inline(self, client):
        r = client.post("/acta/assignment/submit", data={"assignedTo": "J"}, follow_redirects=True)
        html = r.get_data(as_text=True)
        assert "El nombre debe tener al menos 2 caracteres" in html
        assert "El número de serie es requerido" in html
        assert "Vista Previa" not in html

    def test_too_old_date(self, client, assignment_header):
        first = _item_ids(client)[0]
        data = _form(dict(assignment_header, date="1899-12-31"),
                     {first: {"serialNumber": "S", "description": "D", "quantity": "1"}})
        html = client.post("/acta/assignment/submit", data=data,
                           follow_redirects=True).get_data(as_text=True)
        assert "La fecha debe ser igual o posterior al 01/01/1900" in html

    def test_preview_appears(self, client, assignment_header, sample_items):
        html = _submit_two_items(client, assignment_header, sample_items).get_data(as_text=True)
        assert "Vista Previa" in html
        assert "ACTA DE ENTREGA DE EQUIPOS Y HERRAMIENTAS" in html
        assert "05/03/2024" in html
        assert "Mouse inalámbrico" in html
        assert "Descargar PDF" in html and "Imprimir" in html

    def test_user_text_escaped(self, client, assignment_header):
        first = _item_ids(client)[0]
        data = _form(dict(assignment_header, assignedTo="<i>Juan</i>"),
                     {first: {"serialNumber": "S", "description": "D", "quantity": "1"}})
        html = client.post("/acta/assignment/submit", data=data,
                           follow_redirects=True).get_data(as_text=True)
        assert "<i>Juan</i>" not in html
        assert "&lt;i&gt;Juan&lt;/i&gt;" in html


# ═══════════════════════════════════════════════════════════════════════════════
# EXPORT
# ═══════════════════════════════════════════════════════════════════════════════

class TestExport:

    def test_pdf_before_submit_flashes(self, client):
        r = client.get("/acta/assignment/pdf", follow_redirects=True)
        assert r.status_code == 200
        assert MSG_NOTHING_TO_EXPORT in r.get_data(as_text=True)

    def test_pdf_before_submit_json_409(self, client):
        r = client.get("/acta/assignment/pdf", headers={"X-Requested-With": "fetch"})
        assert r.status_code == 409
        assert r.get_json() == {"ok": False, "error": "nothing_to_export",
                                "message": MSG_NOTHING_TO_EXPORT}

    def test_print_before_submit(self, client):
        r = client.get("/acta/exit/print", follow_redirects=True)
        assert MSG_NOTHING_TO_EXPORT in r.get_data(as_text=True)

    def test_end_to_end_download(self, client, assignment_header, sample_items):
        _submit_two_items(client, assignment_header, sample_items)
        r = client.get("/acta/assignment/pdf")
        assert r.status_code == 200
        assert r.mimetype == "application/pdf"
        cd = r.headers["Content-Disposition"]
        assert cd.startswith("attachment")
        assert "filename*=UTF-8''acta_entrega_Juan_P%C3%A9rez_05-03-2024.pdf" in cd

        reader = pdf_reader(r.data)
        box = reader.pages[0].mediabox
        assert (round(float(box.width)), round(float(box.height))) == (792, 612)

    def test_end_to_end_margins(self, client, assignment_header, sample_items):
        import io
        import pdfplumber
        _submit_two_items(client, assignment_header, sample_items)
        data = client.get("/acta/assignment/pdf").data
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            page = pdf.pages[0]
            rects = page.rects
            assert min(r["x0"] for r in rects) == pytest.approx(21 * MM, abs=0.5)
            assert max(r["x1"] for r in rects) == pytest.approx(792 - 20 * MM, abs=0.5)
            assert min(r["top"] for r in rects) == pytest.approx(15 * MM, abs=0.5)
            assert max(r["bottom"] for r in rects) <= 612 - 16 * MM + 0.5

    def test_exit_print_page(self, client, exit_header, sample_items):
        _submit_two_items(client, exit_header, sample_items, kind="exit")
        r = client.get("/acta/exit/print")
        html = r.get_data(as_text=True)
        assert r.status_code == 200
        assert "margin: 20mm 23mm 19mm 24mm" in html
        assert "window.print()" in html
        assert "desde <b>Oficina Central</b> hacia <b>Sede Valencia</b>" in html

    def test_logo_route(self, client, logo_file):
        r = client.get("/acta/logo")
        assert r.status_code == 200
        assert r.mimetype == "image/png"

    def test_logo_route_missing(self, client):
        assert client.get("/acta/logo").status_code == 404

    def test_preview_uses_logo(self, client, logo_file, assignment_header, sample_items):
        html = _submit_two_items(client, assignment_header, sample_items).get_data(as_text=True)
        assert 'src="/acta/logo"' in html


class TestUnknownKind:

    @pytest.mark.parametrize("method, path", [
        ("get", "/acta/loan/pdf"),
        ("get", "/acta/loan/print"),
        ("post", "/acta/loan/submit"),
        ("post", "/acta/loan/items"),
    ])
    def test_404(self, client, method, path):
        assert getattr(client, method)(path).status_code == 404

    def test_api_404_json(self, client):
        r = client.post("/api/actas/loan/validate", json={})
        assert r.status_code == 404
        assert r.get_json()["error"] == "unknown_kind"


# ═══════════════════════════════════════════════════════════════════════════════
# JSON API
# ═══════════════════════════════════════════════════════════════════════════════

class TestApi:

    def test_health(self, client):
        assert client.get("/api/health").get_json() == {"status": "ok", "kinds": ["assignment", "exit"]}

    def test_validate_ok(self, client, exit_payload):
        r = client.post("/api/actas/exit/validate", json=exit_payload)
        body = r.get_json()
        assert r.status_code == 200
        assert body["ok"] is True
        assert body["filename"] == "acta_salida_Juan_Pérez_05-03-2024.pdf"
        assert body["document"]["to"] == "Sede Valencia"
        assert [i["quantity"] for i in body["document"]["items"]] == [1, 3]

    def test_validate_errors(self, client, assignment_payload):
        payload = dict(assignment_payload, date="1899-12-31", items=[])
        r = client.post("/api/actas/assignment/validate", json=payload)
        assert r.status_code == 400
        assert r.get_json() == {"ok": False, "errors": {
            "date": "La fecha debe ser igual o posterior al 01/01/1900",
            "items": "Debe haber al menos un ítem",
        }}

    def test_validate_non_json(self, client):
        r = client.post("/api/actas/assignment/validate", data="nope")
        assert r.status_code == 400
        assert "assignedTo" in r.get_json()["errors"]

    def test_pdf(self, client, exit_payload):
        r = client.post("/api/actas/exit/pdf", json=exit_payload)
        assert r.status_code == 200
        assert r.mimetype == "application/pdf"
        assert "acta_salida_Juan_P%C3%A9rez_05-03-2024.pdf" in r.headers["Content-Disposition"]
        assert r.data.startswith(b"%PDF")

    def test_pdf_errors(self, client, exit_payload):
        r = client.post("/api/actas/exit/pdf", json=dict(exit_payload, to="X"))
        assert r.status_code == 400
        assert r.get_json()["errors"] == {"to": "El destino debe tener al menos 2 caracteres"}

    @pytest.mark.parametrize("body", [[1, 2], "update", 42, False])
    @pytest.mark.parametrize("endpoint", ["validate", "pdf"])
    def test_non_object_json_is_400(self, client, endpoint, body):
        r = client.post(f"/api/actas/assignment/{endpoint}", json=body)
        assert r.status_code == 400
        errors = r.get_json()["errors"]
        assert "assignedTo" in errors and "items" in errors


# ═══════════════════════════════════════════════════════════════════════════════
# SESSION BOUNDS
# ═══════════════════════════════════════════════════════════════════════════════

class TestSessionBounds:

    def test_cookieless_visits_stay_capped(self, app, monkeypatch):
        monkeypatch.setenv("ACTAS_MAX_SESSIONS", "5")
        for _ in range(20):
            assert app.test_client().get("/").status_code == 200
        assert len(app.extensions["actas_sessions"]) == 5

    def test_returning_browser_keeps_its_session(self, app, monkeypatch):
        monkeypatch.setenv("ACTAS_MAX_SESSIONS", "3")
        keeper = app.test_client()
        keeper.post("/acta/assignment/items", data={})
        for _ in range(10):
            app.test_client().get("/")
            assert len(_item_ids(keeper)) == 2
        assert len(app.extensions["actas_sessions"]) == 3
