"""
HTML views of a VisualDocument: the on-screen preview fragment and the
standalone print page.

The print page pins @page to letter landscape with the kind's export
margins (both kinds) and hides .pdf-actions, so the browser's print dialog
gets exactly the previewed content.
"""

from jinja2 import Environment
from markupsafe import Markup

from actas.forms.renderer import VisualDocument

_env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)

ACTA_CSS = """
.acta{background:#fff;color:#000;max-width:11in;margin:0 auto;font-family:Arial,Helvetica,sans-serif;font-size:14px}
.acta-head{display:flex;align-items:center;border:1px solid #d1d5db;padding:12px;margin-bottom:24px}
.acta-logo{width:80px;height:53px;margin-right:16px;display:flex;align-items:center;justify-content:center;background:#1a2744;color:#fff;font-weight:700}
.acta-title{font-size:16px;font-weight:600;margin:0}
.acta-inst{font-size:14px;margin:0}
.acta table{width:100%;border-collapse:collapse;margin-bottom:24px}
.acta td,.acta th{border:1px solid #d1d5db;padding:8px 12px}
.acta .facts td:first-child{width:25%}
.acta .items th,.acta .items td{text-align:center}
.acta .items tr.blank td{padding:24px 12px}
.acta-legal{line-height:1.6;margin:16px 0 64px}
.acta-legal b{font-weight:600}
.acta-signs{display:grid;grid-template-columns:repeat(3,1fr);gap:48px}
.acta-signs div{border-top:1px solid #000;padding-top:8px;text-align:center}
.acta-signs div:last-child span{text-decoration:underline}
"""

PREVIEW_TMPL = _env.from_string("""\
<div class="acta" id="acta-{{ v.kind }}">
  <div class="acta-head">
    {% if logo_src %}<img class="acta-logo" src="{{ logo_src }}" alt="{{ v.logo_alt }}">
    {% else %}<div class="acta-logo" role="img" aria-label="{{ v.logo_alt }}">MODO</div>{% endif %}
    <div>
      <p class="acta-title">{{ v.title }}</p>
      <p class="acta-inst">{{ v.institution }}</p>
    </div>
  </div>
  <table class="facts"><tbody>
  {% for label, value in v.facts %}
    <tr><td>{{ label }}</td><td>{{ value }}</td></tr>
  {% endfor %}
  </tbody></table>
  <table class="items">
    <thead><tr>{% for col in v.columns %}<th>{{ col }}</th>{% endfor %}</tr></thead>
    <tbody>
    {% for row in v.rows %}
      <tr>{% for val in row %}<td>{{ val }}</td>{% endfor %}</tr>
    {% endfor %}
    {% for _ in range(v.blank_rows) %}
      <tr class="blank"><td></td><td></td><td></td></tr>
    {% endfor %}
    </tbody>
  </table>
  <p class="acta-legal">{% for text, bold in v.legal_segments %}{% if bold %}<b>{{ text }}</b>{% else %}{{ text }}{% endif %}{% endfor %}</p>
  <div class="acta-signs">
  {% for label in v.signatures %}
    <div><span>{{ label }}</span></div>
  {% endfor %}
  </div>
</div>
""")

PRINT_TMPL = _env.from_string("""\
<!DOCTYPE html>
<html lang="es"><head><meta charset="utf-8">
<title>{{ v.filename }}</title>
<style>
{{ css }}
@page { size: {{ v.page.page_size }} {{ v.page.orientation }}; margin: {{ v.page.css_margin() }}; }
@media print {
  body { margin: 0; }
  .pdf-actions { display: none !important; }
}
.pdf-actions{max-width:11in;margin:16px auto;display:flex;gap:8px;justify-content:flex-end}
</style></head>
<body>
<div class="pdf-actions">
  <button type="button" onclick="window.print()">Imprimir</button>
  <button type="button" onclick="history.back()">Volver</button>
</div>
{{ preview }}
<script>window.addEventListener("load", function () { window.print(); });</script>
</body></html>
""")


def render_preview_html(visual: VisualDocument, logo_src: str = "") -> Markup:
    """Preview fragment, safe to drop into a page template."""
    return Markup(PREVIEW_TMPL.render(v=visual, logo_src=logo_src))


def render_print_page(visual: VisualDocument, logo_src: str = "") -> str:
    """Standalone page that opens the print dialog on load."""
    return PRINT_TMPL.render(v=visual, css=Markup(ACTA_CSS),
                             preview=render_preview_html(visual, logo_src))
