"""
Acta form engine.

    kinds.py        ActaKind configs (assignment / exit), labels, messages
    models.py       pydantic schema + immutable Document
    validator.py    raw form values → Document or per-field errors
    line_items.py   editable equipment list
    session.py      FormSession state machine + SessionRegistry
    renderer.py     Document → VisualDocument
    acta_pdf.py     VisualDocument → PDF (reportlab)
    print_view.py   VisualDocument → preview / print HTML
    exporter.py     render/export/print capability used by sessions
"""
