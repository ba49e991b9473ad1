import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from larder.logic.shopping.list_builder import group_by_category


def _fmt(value: float) -> str:
    return f"{value:g}" if float(value).is_integer() else f"{value:.2f}".rstrip("0")


def generate_pdf_for_shopping_list(items, start=None, end=None):
    """Printable shopping list: one table per category with Item / Need / Have / Buy."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    if start and end:
        title = f"Shopping List: {start} to {end}"
    else:
        title = "Shopping List"
    elements = [Paragraph(title, styles["Title"]), Spacer(1, 16)]

    if not items:
        elements.append(Paragraph("Nothing to buy: the pantry covers every planned meal.", styles["Normal"]))

    for category, category_items in group_by_category(items).items():
        elements.append(Paragraph(category.replace("_", " ").title(), styles["Heading2"]))
        data = [["Item", "Need", "Have", "Buy"]]
        for item in category_items:
            data.append([
                item.name,
                f"{_fmt(item.needed)} {item.unit}",
                f"{_fmt(item.available)} {item.unit}",
                f"{_fmt(item.shortage)} {item.unit}",
            ])
        table = Table(data, repeatRows=1, colWidths=[220, 100, 100, 100])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
            ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
            ("ALIGN", (1,0), (-1,-1), "CENTER"),
            ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
            ("FONTSIZE", (0,0), (-1,0), 11),
            ("BOTTOMPADDING", (0,0), (-1,0), 8),
            ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 12))

    doc.build(elements)
    return buf.getvalue()
