"""
PDF Quote Generator.

Generates a one-page sign quote from a PriceBreakdown.
Uses fpdf2 (pure Python, no system dependencies).

Sections:
1. Header + Sign Summary
2. Costs
3. Material Usage
4. Notes
"""

from datetime import datetime

from fpdf import FPDF

from .config import settings

# --- Product mode display names ---
MODE_NAMES = {
    "SolidColourCutVinyl": "Solid Colour Cut Vinyl",
    "PrintAndCutVinyl": "Print & Cut Vinyl",
    "PrintedVinylOnly": "Printed Vinyl",
    "PrintedVinylOnSubstrate": "Printed Vinyl on Substrate",
    "SubstrateOnly": "Substrate Only",
}


def _fmt(amount) -> str:
    """Format a number as £X,XXX.XX"""
    try:
        return f"{settings.CURRENCY_SYMBOL}{float(amount):,.2f}"
    except (ValueError, TypeError):
        return f"{settings.CURRENCY_SYMBOL}0.00"


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        text
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u00d7", "x")    # multiplication sign
        .replace("\u00b2", "2")    # superscript two
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


class QuotePDF(FPDF):
    """Custom PDF class for sign quote documents."""

    def __init__(self, shop_name="", shop_info=""):
        super().__init__()
        self.shop_name = shop_name
        self.shop_info = shop_info
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # drawn once in generate_quote_pdf

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")

    def section_header(self, title):
        """Render a section header bar."""
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {title}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def line_item(self, label, amount, bold=False):
        """Label on the left, money on the right."""
        self.set_font("Helvetica", "B" if bold else "", 9)
        self.cell(140, 6, _safe(label))
        self.cell(50, 6, _safe(_fmt(amount)), align="R")
        self.ln()

    def usage_line(self, label, value):
        self.set_font("Helvetica", "", 9)
        self.cell(70, 5.5, _safe(label))
        self.cell(120, 5.5, _safe(str(value)))
        self.ln()


def _summary_lines(breakdown, request) -> list:
    """Plain-language description of the sign."""
    lines = [
        f"Size: {request.width_mm:g} x {request.height_mm:g} mm",
        f"Quantity: {breakdown.quantity}",
    ]
    if request.double_sided:
        lines.append("Double-sided")
    if request.finishing.value != "None":
        lines.append(f"Finishing: {request.finishing.value}")
    if request.plotter_cut.value != "None":
        lines.append(f"Cut option: {request.plotter_cut.value}")
    for item in breakdown.costs.vinyl:
        lines.append(f"Vinyl: {item.media}")
    for item in breakdown.costs.substrate:
        lines.append(f"Substrate: {item.material} ({item.sheet} mm)")
    return lines


def generate_quote_pdf(breakdown, request, quote_ref: str = None) -> bytes:
    """
    Generate a PDF quote document.

    Args:
        breakdown: PriceBreakdown from the pricing engine
        request: the SignRequest it was priced from
        quote_ref: optional reference printed under the title

    Returns:
        PDF bytes
    """
    shop_name = settings.COMPANY_NAME or "Quote"
    shop_info = " | ".join(p for p in [settings.COMPANY_PHONE, settings.COMPANY_EMAIL] if p)

    pdf = QuotePDF(shop_name=shop_name, shop_info=shop_info)
    pdf.alias_nb_pages()
    pdf.add_page()
    pw = pdf.w - pdf.l_margin - pdf.r_margin  # printable width

    # ── SECTION 1: Header ──
    pdf.set_font("Helvetica", "B", 20)
    pdf.cell(0, 10, _safe(shop_name), new_x="LMARGIN", new_y="NEXT")
    if shop_info:
        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(100, 100, 100)
        pdf.cell(0, 5, _safe(shop_info), new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(0, 0, 0)
    pdf.ln(4)

    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, _safe(f"QUOTE {quote_ref}" if quote_ref else "QUOTE"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, f"Date: {datetime.now().strftime('%d %B %Y')}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, "Valid for: 30 days", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    mode = breakdown.mode.value
    pdf.set_font("Helvetica", "B", 11)
    pdf.cell(0, 6, _safe(f"Product: {MODE_NAMES.get(mode, mode)}"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 9)
    for line in _summary_lines(breakdown, request):
        pdf.cell(pw, 4.5, _safe(line), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # ── SECTION 2: Costs ──
    pdf.section_header("COSTS")
    pdf.line_item("Materials", breakdown.materials)
    if breakdown.ink:
        pdf.line_item("Ink", breakdown.ink)
    pdf.line_item("Setup", breakdown.setup)
    pdf.line_item("Cutting", breakdown.cutting)
    if breakdown.finishing_uplift:
        pdf.line_item("Finishing", breakdown.finishing_uplift)
    pdf.line_item(f"Delivery ({breakdown.delivery_band})", breakdown.delivery)
    pdf.ln(1)
    pdf.line_item("Total (ex VAT)", breakdown.total, bold=True)
    pdf.line_item("VAT", breakdown.vat)

    pdf.ln(1)
    pdf.set_fill_color(45, 55, 72)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font("Helvetica", "B", 13)
    pdf.cell(130, 10, "  TOTAL INC. VAT", fill=True)
    pdf.cell(60, 10, _safe(f"{_fmt(breakdown.total_inc_vat)}  "), fill=True, align="R")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(14)

    # ── SECTION 3: Material usage ──
    pdf.section_header("MATERIAL USAGE")
    if breakdown.vinyl_lm is not None:
        pdf.usage_line("Vinyl (linear metres)", f"{breakdown.vinyl_lm:.2f} lm")
        pdf.usage_line("Vinyl incl. waste", f"{breakdown.vinyl_lm_with_waste:.2f} lm")
    if breakdown.effective_width_mm is not None:
        pdf.usage_line("Effective roll width", f"{breakdown.effective_width_mm:g} mm")
    if breakdown.substrate_sheets_charged is not None:
        pdf.usage_line("Panel size", f"{breakdown.panel_width_mm:g} x {breakdown.panel_height_mm:g} mm")
        pdf.usage_line("Panels per sheet", breakdown.panels_per_sheet)
        pdf.usage_line("Sheets needed / charged",
                       f"{breakdown.substrate_sheets_needed:.2f} / {breakdown.substrate_sheets_charged:g}")
        pdf.usage_line("Sheet usage / waste",
                       f"{breakdown.sheet_usage_pct:.1f}% / {breakdown.sheet_waste_pct:.1f}%")
    pdf.ln(3)

    # ── SECTION 4: Notes ──
    if breakdown.notes:
        pdf.section_header("NOTES")
        pdf.set_font("Helvetica", "", 8)
        for note in breakdown.notes:
            pdf.set_x(pdf.l_margin)
            pdf.multi_cell(pw, 4.5, _safe(f"  - {note}"), new_x="LMARGIN", new_y="NEXT")

    pdf.ln(6)
    pdf.set_font("Helvetica", "I", 8)
    pdf.set_text_color(100, 100, 100)
    pdf.set_x(pdf.l_margin)
    pdf.cell(pw, 4, "Prices include delivery. VAT shown separately.", new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)

    return bytes(pdf.output())
