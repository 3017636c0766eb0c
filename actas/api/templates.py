"""
Actas Dashboard — HTML Templates
Page shell, per-kind form and preview section, rendered with
render_template_string from dashboard.py.
"""

from actas.forms.print_view import ACTA_CSS

BASE_CSS = """
:root{--bg:#f3f4f6;--sf:#fff;--sf2:#f9fafb;--bd:#d1d5db;--tx:#111827;--tx2:#6b7280;
--ac:#2563eb;--ac2:#1d4ed8;--gn:#059669;--rd:#dc2626;--r:8px}
*{margin:0;padding:0;box-sizing:border-box}
body{font-family:'DM Sans',Arial,sans-serif;background:var(--bg);color:var(--tx);min-height:100vh}
a{color:var(--ac);text-decoration:none}
.hdr{background:var(--sf);border-bottom:1px solid var(--bd);padding:14px 28px}
.hdr h1{font-size:20px;font-weight:600;letter-spacing:-0.3px}
.ctr{max-width:1200px;margin:0 auto;padding:20px 28px}
.tabs{display:flex;gap:4px;margin-bottom:16px;border-bottom:1px solid var(--bd)}
.tab{padding:10px 18px;font-size:14px;font-weight:500;color:var(--tx2);border-bottom:2px solid transparent}
.tab-on{color:var(--ac);border-bottom-color:var(--ac)}
.card{background:var(--sf);border:1px solid var(--bd);border-radius:var(--r);padding:20px;margin-bottom:16px}
.card-t{font-size:18px;font-weight:600;margin-bottom:14px}
.grid{display:grid;grid-template-columns:repeat(2,1fr);gap:14px}
.fld label{display:block;font-size:13px;font-weight:500;margin-bottom:4px}
.fld input{width:100%;padding:8px 10px;border:1px solid var(--bd);border-radius:6px;font-size:14px}
.fld-err input{border-color:var(--rd)}
.err{color:var(--rd);font-size:12px;margin-top:3px}
.item{display:grid;grid-template-columns:2fr 3fr 1fr auto;gap:10px;align-items:end;padding:10px 0;border-bottom:1px solid var(--sf2)}
.btn{padding:8px 16px;font-size:14px;font-weight:600;border-radius:6px;border:1px solid var(--bd);background:var(--sf2);color:var(--tx);cursor:pointer}
.btn-p{background:var(--ac);border-color:var(--ac);color:#fff}
.btn-p:hover{background:var(--ac2)}
.btn-d{color:var(--rd)}
.btn:disabled{opacity:.5;cursor:wait}
.row{display:flex;gap:10px;margin-top:14px}
.alert{padding:10px 14px;border-radius:6px;margin-bottom:12px;font-size:14px}
.al-s{background:rgba(5,150,105,.1);color:var(--gn)}
.al-e{background:rgba(220,38,38,.1);color:var(--rd)}
.al-i{background:rgba(37,99,235,.1);color:var(--ac)}
.pdf-actions{display:flex;gap:10px;justify-content:flex-end;margin-bottom:14px}
"""

PAGE_TOP = """<!DOCTYPE html><html lang="es"><head><meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Actas Soporte técnico MoDo</title>
<style>{{ base_css|safe }}{{ acta_css|safe }}</style></head><body>
<div class="hdr"><h1>Actas Soporte técnico MoDo</h1></div>
<div class="ctr">
{% with messages = get_flashed_messages(with_categories=true) %}
 {% for cat, msg in messages %}<div class="alert al-{{ 's' if cat == 'success' else 'e' if cat == 'error' else 'i' }}">{{ msg }}</div>{% endfor %}
{% endwith %}
<div class="tabs">
{% for k in kinds.values() %}
 <a class="tab{{ ' tab-on' if k.key == kind.key }}" href="{{ url_for('actas.home', tab=k.key) }}">{{ k.tab_label }}</a>
{% endfor %}
</div>
"""

PAGE_BOTTOM = """
</div>
<script>
function downloadPdf(btn){
 var label=btn.textContent;
 btn.disabled=true;btn.textContent='Generando...';
 fetch(btn.dataset.url,{headers:{'X-Requested-With':'fetch'}}).then(function(r){
  if(!r.ok){return r.json().then(function(d){alert(d.message||'Error');});}
  var cd=r.headers.get('Content-Disposition')||'';
  var m=/filename\\*=UTF-8''([^;]+)/i.exec(cd)||/filename="?([^";]+)"?/i.exec(cd);
  var name=m?decodeURIComponent(m[1]):'acta.pdf';
  return r.blob().then(function(b){
   var a=document.createElement('a');a.href=URL.createObjectURL(b);a.download=name;
   document.body.appendChild(a);a.click();a.remove();URL.revokeObjectURL(a.href);
  });
 }).catch(function(){alert('Error al generar el PDF');})
 .finally(function(){btn.disabled=false;btn.textContent=label;});
}
</script>
</body></html>"""

FORM_SECTION = """
<div class="card">
 <div class="card-t">{{ kind.heading }}</div>
 <form method="post" action="{{ url_for('actas.submit', kind=kind.key) }}" novalidate>
  <div class="grid">
   <div class="fld{{ ' fld-err' if s.errors.get('date') }}">
    <label for="{{ kind.key }}-date">Fecha</label>
    <input type="date" id="{{ kind.key }}-date" name="date" min="{{ min_date }}" value="{{ s.header.date }}">
    {% if s.errors.get('date') %}<div class="err">{{ s.errors['date'] }}</div>{% endif %}
   </div>
   {% for name, label, placeholder in kind.header_fields %}
   <div class="fld{{ ' fld-err' if s.errors.get(name) }}">
    <label for="{{ kind.key }}-{{ name }}">{{ label }}</label>
    <input type="text" id="{{ kind.key }}-{{ name }}" name="{{ name }}" placeholder="{{ placeholder }}" value="{{ s.header[name] }}">
    {% if s.errors.get(name) %}<div class="err">{{ s.errors[name] }}</div>{% endif %}
   </div>
   {% endfor %}
  </div>

  <div class="card-t" style="margin-top:20px;font-size:15px">Equipos</div>
  {% if s.errors.get('items') %}<div class="err">{{ s.errors['items'] }}</div>{% endif %}
  {% for item in items %}
  {% set i = loop.index0 %}
  <div class="item">
   {% for fname, flabel, fplaceholder in item_fields %}
   {% set path = "items[%d].%s"|format(i, fname) %}
   <div class="fld{{ ' fld-err' if s.errors.get(path) }}">
    <label>{{ flabel }}</label>
    <input type="{{ 'number' if fname == 'quantity' else 'text' }}"{% if fname == 'quantity' %} min="1" step="1"{% endif %}
     name="items-{{ item.id }}-{{ fname }}" placeholder="{{ fplaceholder }}" value="{{ item[fname] }}">
    {% if s.errors.get(path) %}<div class="err">{{ s.errors[path] }}</div>{% endif %}
   </div>
   {% endfor %}
   <button class="btn btn-d" type="submit" title="Eliminar"
    formaction="{{ url_for('actas.remove_item', kind=kind.key, item_id=item.id) }}"{% if items|length == 1 %} disabled{% endif %}>Eliminar</button>
   {% if s.errors.get("items[%d]"|format(i)) %}<div class="err">{{ s.errors["items[%d]"|format(i)] }}</div>{% endif %}
  </div>
  {% endfor %}

  <div class="row">
   <button class="btn" type="submit" formaction="{{ url_for('actas.add_item', kind=kind.key) }}">Agregar Equipo</button>
   <button class="btn btn-p" type="submit">{{ kind.submit_label }}</button>
  </div>
 </form>
</div>

{% if preview %}
<div class="card" id="preview">
 <div class="card-t">Vista Previa</div>
 <div class="pdf-actions">
  <a class="btn" href="{{ url_for('actas.print_acta', kind=kind.key) }}" target="_blank">Imprimir</a>
  <button class="btn btn-p" type="button" data-url="{{ url_for('actas.download_pdf', kind=kind.key) }}" onclick="downloadPdf(this)">Descargar PDF</button>
 </div>
 {{ preview }}
</div>
{% endif %}
"""

PAGE_HOME = PAGE_TOP + FORM_SECTION + PAGE_BOTTOM
