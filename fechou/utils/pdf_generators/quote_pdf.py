# fechou/utils/pdf_generators/quote_pdf.py

from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from fechou.utils.decimal_utils import format_brl
from fechou.utils.pdf_generators import common


def build_quote_pdf(quote, *, watermark: bool) -> bytes:
    """Render a quote (pedido) as PDF bytes.

    ``quote`` must have ``user``, ``client`` and ``items`` loaded.
    """
    user = quote.user
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=common.PAGE_MARGIN,
        leftMargin=common.PAGE_MARGIN,
        topMargin=common.PAGE_MARGIN,
        bottomMargin=common.PAGE_MARGIN + 12,
        title=f"Pedido {quote.quote_number}",
        author=user.business_name or user.display_name,
    )
    styles = common.build_styles()
    width = doc.width
    brand = common.brand_color(user, premium=not watermark)
    elements = []

    # -------------------------------
    # Header
    # -------------------------------
    elements.extend(common.business_header(user, styles))
    elements.append(Paragraph(f"PEDIDO Nº {quote.quote_number}", styles["DocTitle"]))
    elements.append(Paragraph(common.text(quote.title), styles["Normal"]))
    elements.append(
        Paragraph(
            f"Emitido em {common.fmt_date(quote.created_at)} | "
            f"Válido até {common.fmt_date(quote.valid_until)}",
            styles["Small"],
        )
    )
    elements.append(Spacer(1, 10))

    # -------------------------------
    # Deadline
    # -------------------------------
    elements.append(common.section_bar("PRAZO DE ENTREGA", brand, styles, width))
    elements.append(Paragraph(common.text(quote.execution_deadline), styles["Small"]))
    elements.append(Spacer(1, 10))

    # -------------------------------
    # Client
    # -------------------------------
    elements.append(common.section_bar("DADOS DO CLIENTE", brand, styles, width))
    elements.extend(common.client_block(quote.client, styles))

    # -------------------------------
    # Items
    # -------------------------------
    elements.append(common.section_bar("SERVIÇOS", brand, styles, width))
    data = [["ITEM", "NOME", "QTD.", "VR. UNIT.", "SUBTOTAL"]]
    for position, item in enumerate(quote.items, start=1):
        data.append([
            position,
            Paragraph(common.text(item.description), styles["Small"]),
            item.quantity,
            format_brl(item.unit_price),
            format_brl(item.total),
        ])

    table = Table(data, colWidths=[35, width - 275, 50, 95, 95], repeatRows=1)
    table.setStyle(
        TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ])
    )
    elements.append(table)
    elements.append(Spacer(1, 8))

    # -------------------------------
    # Totals
    # -------------------------------
    totals = Table(
        [
            ["SERVIÇOS:", format_brl(quote.subtotal)],
            ["DESCONTOS:", format_brl(quote.discount)],
            ["TOTAL:", format_brl(quote.total)],
        ],
        colWidths=[width - 120, 120],
    )
    totals.setStyle(
        TableStyle([
            ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
            ("FONTNAME", (0, 2), (-1, 2), "Helvetica-Bold"),
            ("TEXTCOLOR", (0, 2), (-1, 2), brand),
            ("LINEABOVE", (0, 2), (-1, 2), 0.5, colors.black),
        ])
    )
    elements.append(totals)
    elements.append(Spacer(1, 12))

    # -------------------------------
    # Terms / notes
    # -------------------------------
    if quote.payment_terms or user.pix_key:
        elements.append(common.section_bar("CONDIÇÕES DE PAGAMENTO", brand, styles, width))
        if quote.payment_terms:
            elements.append(Paragraph(common.text(quote.payment_terms), styles["Small"]))
        if user.pix_key:
            elements.append(Paragraph(f"<b>Chave PIX:</b> {common.text(user.pix_key)}", styles["Small"]))
        elements.append(Spacer(1, 10))

    if quote.description:
        elements.append(Paragraph(f"<b>DESCRIÇÃO:</b> {common.text(quote.description)}", styles["Small"]))
        elements.append(Spacer(1, 6))

    if quote.observations:
        elements.append(Paragraph(f"<b>OBSERVAÇÕES:</b> {common.text(quote.observations)}", styles["Small"]))
        elements.append(Spacer(1, 12))

    # -------------------------------
    # Signature
    # -------------------------------
    elements.append(Spacer(1, 20))
    elements.append(common.signature_box("Assinatura do cliente", styles, width))

    decorate = common.page_decorator(watermark)
    doc.build(elements, onFirstPage=decorate, onLaterPages=decorate)
    return buffer.getvalue()
