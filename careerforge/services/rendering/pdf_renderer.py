"""PDF export: layout blocks -> HTML (Jinja2) -> PDF bytes (WeasyPrint)."""
from jinja2 import Environment, PackageLoader, select_autoescape
from weasyprint import CSS, HTML

from careerforge.schemas.resume import ResumeContent
from careerforge.services.rendering.layout import DocumentLayout, build_layout

PDF_STYLES = """
@page { size: Letter; margin: 50pt; }
body { font-family: Helvetica, Arial, sans-serif; font-size: 10pt; color: #000000; }
p { margin: 0 0 2pt 0; }
.header { text-align: center; margin-bottom: 18pt; }
.header .name { font-size: 24pt; font-weight: bold; margin-bottom: 4pt; }
.header .contact { font-size: 10pt; }
.header .links { font-size: 9pt; color: #0066cc; }
.section { margin-bottom: 12pt; }
.section h2 {
  font-size: 14pt; font-weight: bold; color: #%(accent)s;
  border-bottom: 1pt solid #%(accent)s; margin: 0 0 6pt 0; padding-bottom: 2pt;
}
.entry { margin-bottom: 6pt; }
.title { font-size: 11pt; }
.subtitle, .meta { font-size: 9pt; color: #666666; }
.body { text-align: justify; }
.bullet { padding-left: 10pt; }
.link { font-size: 9pt; color: #0066cc; }
"""


def _get_env() -> Environment:
    return Environment(
        loader=PackageLoader("careerforge", "templates"),
        autoescape=select_autoescape(["html", "xml"]),
    )


def render_html(layout: DocumentLayout, title: str = "") -> str:
    template = _get_env().get_template("resume.html")
    return template.render(layout=layout, title=title)


def render_pdf(resume: ResumeContent) -> bytes:
    """Render a resume to PDF bytes. Library errors propagate to the caller."""
    layout = build_layout(resume)
    html = render_html(layout, title=getattr(resume, "title", "") or "")
    css = CSS(string=PDF_STYLES % {"accent": layout.accent})
    return HTML(string=html, base_url=".").write_pdf(stylesheets=[css])
