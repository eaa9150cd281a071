# fechou/utils/pdf_generators/common.py

from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_CENTER
from reportlab.platypus import Paragraph, Spacer, Table, TableStyle

DEFAULT_BRAND_COLOR = "#3B82F6"
FOOTER_TEXT = "Pedido emitido no Fechou! - www.fechou.com.br"
WATERMARK_LINES = ("Fechou!", "O jeito moderno", "de fechar negócios")
PAGE_MARGIN = 36


def text(value) -> str:
    return escape(str(value)) if value not in (None, "") else "-"


def fmt_date(value) -> str:
    return value.strftime("%d/%m/%Y") if value else "-"


def brand_color(user, premium: bool):
    if premium and user.primary_color:
        try:
            return colors.HexColor(user.primary_color)
        except ValueError:
            pass
    return colors.HexColor(DEFAULT_BRAND_COLOR)


def build_styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle("Small", parent=styles["Normal"], fontSize=9, leading=11))
    styles.add(ParagraphStyle("DocTitle", parent=styles["Heading1"], alignment=TA_CENTER, fontSize=16))
    styles.add(ParagraphStyle("Section", parent=styles["Heading4"], textColor=colors.white, spaceBefore=0, spaceAfter=0))
    return styles


# -------------------------------
# Page decorations
# -------------------------------
def draw_footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawCentredString(A4[0] / 2, 20, FOOTER_TEXT)
    canvas.restoreState()


def draw_watermark(canvas, doc):
    """Diagonal translucent Fechou! mark stamped on free-plan documents."""
    canvas.saveState()
    canvas.setFillColor(colors.Color(0.4, 0.4, 0.4))
    canvas.setFillAlpha(0.1)
    canvas.translate(A4[0] / 2, A4[1] / 2)
    canvas.rotate(45)

    title, *taglines = WATERMARK_LINES
    canvas.setFont("Helvetica-Bold", 72)
    canvas.drawCentredString(0, 0, title)

    canvas.setFont("Helvetica", 28)
    for offset, line in enumerate(taglines, start=1):
        canvas.drawCentredString(0, -34 * offset, line)

    canvas.restoreState()


def page_decorator(watermark: bool):
    def on_page(canvas, doc):
        draw_footer(canvas, doc)
        if watermark:
            draw_watermark(canvas, doc)

    return on_page


# -------------------------------
# Shared blocks
# -------------------------------
def business_header(user, styles) -> list:
    name = user.business_name or user.display_name
    elements = [Paragraph(f"<b>{text(name)}</b>", styles["Heading2"])]

    if user.address:
        address = user.address + (f", {user.numero}" if user.numero else "")
        if user.complemento:
            address += f" - {user.complemento}"
        elements.append(Paragraph(text(address), styles["Small"]))
        if user.cidade and user.estado:
            elements.append(
                Paragraph(
                    f"{text(user.cidade)}/{text(user.estado)} - CEP: {text(user.cep)}",
                    styles["Small"],
                )
            )

    contact = []
    if user.cpf_cnpj:
        contact.append(f"CPF/CNPJ: {text(user.cpf_cnpj)}")
    if user.phone:
        contact.append(text(user.phone))
    contact.append(text(user.email))
    elements.append(Paragraph(" | ".join(contact), styles["Small"]))
    elements.append(Spacer(1, 12))
    return elements


def section_bar(title: str, color, styles, width: float) -> Table:
    bar = Table([[Paragraph(f"<b>{escape(title)}</b>", styles["Section"])]], colWidths=[width])
    bar.setStyle(
        TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), color),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ])
    )
    return bar


def client_block(client, styles) -> list:
    address = client.address or ""
    if client.number:
        address += f", {client.number}"
    if client.city:
        address += f" - {client.city}"
        if client.state:
            address += f"/{client.state}"

    return [
        Paragraph(f"<b>Nome:</b> {text(client.name)}", styles["Small"]),
        Paragraph(f"<b>Telefone:</b> {text(client.phone)}", styles["Small"]),
        Paragraph(f"<b>E-mail:</b> {text(client.email)}", styles["Small"]),
        Paragraph(f"<b>Endereço:</b> {text(address or None)}", styles["Small"]),
        Spacer(1, 10),
    ]


def signature_box(label: str, styles, width: float) -> Table:
    box = Table(
        [[""], [Paragraph(escape(label), ParagraphStyle("Sig", parent=styles["Normal"], alignment=TA_CENTER))]],
        colWidths=[width],
        rowHeights=[50, 20],
    )
    box.setStyle(
        TableStyle([
            ("BOX", (0, 0), (-1, -1), 0.5, colors.black),
            ("LINEABOVE", (0, 1), (-1, 1), 0.5, colors.black),
        ])
    )
    return box
