# fechou/utils/pdf_generators/receipt_pdf.py

from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from fechou.utils.decimal_utils import format_brl
from fechou.utils.pdf_generators import common

METHOD_LABELS = {
    "PIX": "PIX",
    "CREDIT_CARD": "Cartão de crédito",
    "BANK_SLIP": "Boleto",
    "CASH": "Dinheiro",
    "TRANSFER": "Transferência",
}


def build_receipt_pdf(quote, payment=None, *, watermark: bool) -> bytes:
    """Render the payment receipt (recibo) of a paid quote."""
    user = quote.user
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=common.PAGE_MARGIN,
        leftMargin=common.PAGE_MARGIN,
        topMargin=common.PAGE_MARGIN,
        bottomMargin=common.PAGE_MARGIN + 12,
        title=f"Recibo {quote.quote_number}",
    )
    styles = common.build_styles()
    width = doc.width
    brand = common.brand_color(user, premium=not watermark)

    amount = payment.amount if payment else quote.total
    method = METHOD_LABELS.get(payment.method.value, payment.method.value) if payment else "-"
    paid_at = (payment.paid_at if payment and payment.paid_at else quote.paid_at)
    issuer = user.business_name or user.display_name

    elements = common.business_header(user, styles)
    elements.append(Paragraph(f"RECIBO - PEDIDO Nº {quote.quote_number}", styles["DocTitle"]))
    elements.append(Spacer(1, 10))

    elements.append(
        Paragraph(
            f"Recebi(emos) de <b>{common.text(quote.client.name)}</b> a importância de "
            f"<b>{format_brl(amount)}</b> referente a <b>{common.text(quote.title)}</b>.",
            styles["Normal"],
        )
    )
    elements.append(Spacer(1, 10))

    details = Table(
        [
            ["Forma de pagamento:", method],
            ["Data do pagamento:", common.fmt_date(paid_at)],
            ["Valor:", format_brl(amount)],
        ],
        colWidths=[150, width - 150],
    )
    details.setStyle(
        TableStyle([
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("LINEBELOW", (0, -1), (-1, -1), 0.5, brand),
        ])
    )
    elements.append(details)
    elements.append(Spacer(1, 14))

    elements.append(common.section_bar("SERVIÇOS", brand, styles, width))
    data = [["NOME", "QTD.", "SUBTOTAL"]]
    for item in quote.items:
        data.append([
            Paragraph(common.text(item.description), styles["Small"]),
            item.quantity,
            format_brl(item.total),
        ])
    data.append(["DESCONTOS", "", format_brl(quote.discount)])
    data.append(["TOTAL", "", format_brl(quote.total)])

    table = Table(data, colWidths=[width - 170, 60, 110])
    table.setStyle(
        TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ])
    )
    elements.append(table)
    elements.append(Spacer(1, 30))

    elements.append(common.signature_box(issuer, styles, width))

    decorate = common.page_decorator(watermark)
    doc.build(elements, onFirstPage=decorate, onLaterPages=decorate)
    return buffer.getvalue()
