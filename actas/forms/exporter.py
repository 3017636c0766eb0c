"""
Renderer + exporter capability handed to every FormSession.

ActaExporter is the production implementation: renderer.py for the visual
mapping, acta_pdf.py for the PDF, print_view.py for the print page. Tests
swap in fakes with the same three methods.
"""

from actas.core.paths import find_logo
from actas.forms.acta_pdf import PdfFile, generate_acta_pdf
from actas.forms.kinds import PageConfig
from actas.forms.models import Document
from actas.forms.print_view import render_print_page
from actas.forms.renderer import VisualDocument, render_document


class ActaExporter:
    """render(document) → visual, export(visual, page) → PdfFile, print(visual) → HTML.

    ``logo_url`` is where the web layer serves the logo; HTML views fall
    back to the text badge when it is unset or no logo file exists.
    """

    def __init__(self, institution=None, logo_url=""):
        self.institution = institution
        self.logo_url = logo_url

    def logo_src(self) -> str:
        return self.logo_url if self.logo_url and find_logo() else ""

    def render(self, document: Document) -> VisualDocument:
        return render_document(document, institution=self.institution)

    def export(self, visual: VisualDocument, page_config: PageConfig = None) -> PdfFile:
        return generate_acta_pdf(visual, page_config or visual.page)

    def print(self, visual: VisualDocument) -> str:
        return render_print_page(visual, self.logo_src())
