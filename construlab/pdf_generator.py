"""
PDF materials report.

Generates the printable materials report from an Estimate dict.
Uses fpdf2 (pure Python, no system dependencies).

Sections:
1. Header + Project Summary
2. Material Quantities
3. Reinforcement Detail (only when the estimate carries a steel breakdown)
Footer: legal disclaimer

White-labeled: PRO users with a company name get their own name/logo in the
header and no product branding.
"""

import logging
from pathlib import Path
from datetime import datetime

from fpdf import FPDF

from .config import settings
from .i18n import t
from .units import format_number

logger = logging.getLogger(__name__)

BRAND_COLOR = (37, 99, 235)


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        str(text)
        .replace("•", "-")    # bullet
        .replace("—", " - ")  # em dash
        .replace("–", "-")    # en dash
        .replace("→", "->")   # arrow
        .replace("“", '"')
        .replace("”", '"')
        .replace("‘", "'")
        .replace("’", "'")
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def _local_logo_path(logo_url: str):
    """Logos uploaded without R2 live under uploads/. Only files inside that directory are embedded."""
    if not logo_url or not logo_url.startswith("/uploads/"):
        return None
    root = Path("uploads").resolve()
    path = (Path(".") / logo_url.lstrip("/")).resolve()
    if root not in path.parents:
        logger.warning("Refusing logo path outside uploads/: %s", logo_url)
        return None
    return str(path) if path.is_file() else None


class ReportPDF(FPDF):
    """A4 materials report."""

    def __init__(self, footer_text=""):
        super().__init__(format="A4")
        self.footer_text = footer_text
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # Header is drawn once on the first page

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        label = f"{self.footer_text}  -  " if self.footer_text else ""
        self.cell(0, 10, _safe(f"{label}Page {self.page_no()}/{{nb}}"), align="C")

    def section_header(self, title):
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(*BRAND_COLOR)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, _safe(f"  {title.upper()}"), fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def table_header(self, cols):
        """cols: [(label, width), ...] — last two columns right-aligned."""
        self.set_font("Helvetica", "B", 9)
        self.set_fill_color(239, 246, 255)
        for i, (label, width) in enumerate(cols):
            align = "R" if i >= 1 else "L"
            self.cell(width, 7, _safe(label), border="B", fill=True, align=align)
        self.ln()

    def table_row(self, values, widths, bold=False):
        self.set_font("Helvetica", "B" if bold else "", 9)
        for i, (val, width) in enumerate(zip(values, widths)):
            align = "R" if i >= 1 else "L"
            self.cell(width, 7, _safe(str(val)), align=align)
        self.ln()

    def key_value(self, label, value):
        self.set_font("Helvetica", "", 8)
        self.set_text_color(100, 100, 100)
        self.cell(60, 5, _safe(label.upper()))
        self.set_text_color(0, 0, 0)
        self.set_font("Helvetica", "B", 11)
        self.cell(0, 5, _safe(value), new_x="LMARGIN", new_y="NEXT")
        self.ln(1)


def generate_materials_pdf(
    estimate: dict,
    branding: dict = None,
    lang: str = "pt",
    project_name: str = None,
) -> bytes:
    """
    Generate a PDF materials report.

    Args:
        estimate: Estimate dict from a calculator
        branding: {"company_name", "company_logo_url"} when white-label applies, else None
        lang: report language
        project_name: optional project name printed in the summary

    Returns:
        PDF bytes
    """
    branding = branding or {}
    company_name = branding.get("company_name")
    white_label = bool(company_name)
    brand = company_name if white_label else settings.APP_NAME

    pdf = ReportPDF(footer_text="" if white_label else settings.APP_NAME)
    pdf.alias_nb_pages()
    pdf.add_page()
    pw = pdf.w - pdf.l_margin - pdf.r_margin

    units = estimate.get("display", {}).get("units", {})

    # ── Header ──
    logo_path = _local_logo_path(branding.get("company_logo_url")) if white_label else None
    if logo_path:
        try:
            pdf.image(logo_path, x=pdf.l_margin, y=pdf.get_y(), h=14)
            pdf.set_x(pdf.l_margin + 30)
        except Exception as e:
            logger.warning("Could not embed logo %s: %s", logo_path, e)

    pdf.set_font("Helvetica", "B", 20)
    pdf.cell(pw / 2, 10, _safe(brand))
    pdf.set_font("Helvetica", "B", 13)
    pdf.set_text_color(80, 80, 80)
    pdf.cell(0, 10, _safe(t("report_title", lang)), align="R", new_x="LMARGIN", new_y="NEXT")

    pdf.set_font("Helvetica", "", 9)
    pdf.set_text_color(*BRAND_COLOR)
    pdf.cell(pw / 2, 5, _safe("" if white_label else t("report_subtitle", lang)))
    pdf.set_text_color(120, 120, 120)
    pdf.cell(0, 5, datetime.utcnow().strftime("%Y-%m-%d %H:%M UTC"), align="R",
             new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)

    pdf.set_draw_color(*BRAND_COLOR)
    pdf.set_line_width(0.8)
    pdf.line(pdf.l_margin, pdf.get_y() + 2, pdf.w - pdf.r_margin, pdf.get_y() + 2)
    pdf.set_line_width(0.2)
    pdf.ln(8)

    # ── SECTION 1: Summary ──
    pdf.section_header(t("section_summary", lang))
    if project_name:
        pdf.key_value(t("project", lang), project_name)
    pdf.key_value(t("structure_type", lang), estimate.get("structure_type", ""))
    display = estimate.get("display", {})
    pdf.key_value(
        t("footprint_area", lang),
        f"{format_number(display.get('area', 0), 2)} {units.get('area', '')}",
    )
    pdf.key_value(
        t("total_volume", lang),
        f"{format_number(display.get('volume', 0), 3)} {units.get('volume', '')}",
    )

    config = estimate.get("config", {})
    mix = "%gkg cement | %gm3 sand | %gm3 gravel" % (
        config.get("cement_kg_per_m3", 0),
        config.get("sand_m3_per_m3", 0),
        config.get("gravel_m3_per_m3", 0),
    )
    pdf.key_value(t("mix", lang), mix)
    pdf.ln(4)

    # ── SECTION 2: Materials ──
    pdf.section_header(t("section_materials", lang))
    cols = [(t("material", lang), 80), (t("quantity", lang), 55), (t("notes", lang), 55)]
    widths = [c[1] for c in cols]
    pdf.table_header(cols)

    for item in estimate.get("materials", []):
        qty = f"{format_number(item.get('quantity', 0), 2)} {item.get('unit', '')}"
        pdf.table_row([item.get("description", ""), qty, item.get("note", "") or "-"], widths)

    cost = estimate.get("cost")
    if cost and cost.get("total"):
        pdf.set_draw_color(200, 200, 200)
        pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
        pdf.table_row([t("estimated_cost", lang), format_number(cost["total"], 2), ""], widths, bold=True)
    pdf.ln(4)

    # ── SECTION 3: Steel breakdown ──
    breakdown = estimate.get("steel_breakdown")
    if breakdown:
        pdf.section_header(f"{t('section_steel', lang)} ({breakdown.get('type', '')})")
        for part in breakdown.get("parts", []):
            pdf.set_font("Helvetica", "B", 10)
            pdf.cell(100, 6, _safe(part.get("name", "")))
            pdf.cell(0, 6, _safe(f"~{format_number(part.get('weight', 0), 1)} {units.get('weight', '')}"),
                     align="R", new_x="LMARGIN", new_y="NEXT")
            pdf.set_font("Courier", "", 8)
            pdf.set_text_color(*BRAND_COLOR)
            pdf.cell(0, 5, _safe(part.get("detail", "")), new_x="LMARGIN", new_y="NEXT")
            pdf.set_text_color(0, 0, 0)
            pdf.ln(1)
        pdf.ln(4)

    # ── Footer ──
    pdf.ln(6)
    pdf.set_font("Helvetica", "", 7)
    pdf.set_text_color(100, 100, 100)
    pdf.multi_cell(pw, 3.5, _safe(t("disclaimer", lang)), align="C")
    if not white_label:
        pdf.set_font("Helvetica", "B", 7)
        pdf.set_text_color(*BRAND_COLOR)
        pdf.cell(pw, 5, _safe(f"{t('generated_by', lang)} {settings.APP_NAME}"), align="C")
    pdf.set_text_color(0, 0, 0)

    return bytes(pdf.output())
