# fees/receipts.py

"""
Payment receipt PDF.

One page per receipt: center header, payer and billing details, the
payment itself, and the state of the billing record after the payment
history up to and including this entry.
"""

from io import BytesIO
import logging

from django.utils.html import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A5
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from fees.services import PaymentLedger

logger = logging.getLogger(__name__)

HEADER_COLOR = colors.HexColor('#4472C4')


def _running_summary(entry):
    """Ledger state of the record counting entries up to this one."""
    amounts = entry.record.payments.filter(
        sequence__lte=entry.sequence
    ).values_list('amount', flat=True)
    return PaymentLedger.reconcile(entry.record.total_amount, amounts)


def build_receipt_pdf(entry, config):
    """
    Render the receipt for one payment entry.

    Args:
        entry (PaymentEntry): the payment (with its record and student)
        config (CenterConfig): center details, currency and date format

    Returns:
        bytes: the PDF document
    """
    record = entry.record
    student = record.student
    summary = _running_summary(entry)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A5,
        rightMargin=24,
        leftMargin=24,
        topMargin=24,
        bottomMargin=18,
        title=f"Receipt {entry.receipt_number}",
    )

    elements = []

    # Styles
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReceiptTitle',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=HEADER_COLOR,
        spaceAfter=6,
        alignment=TA_CENTER,
    )
    subtitle_style = ParagraphStyle(
        'ReceiptSubtitle',
        parent=styles['Normal'],
        fontSize=8,
        textColor=colors.grey,
        spaceAfter=12,
        alignment=TA_CENTER,
    )

    # Header
    elements.append(Paragraph(escape(config.center_name), title_style))
    contact = " | ".join(
        part for part in (config.center_address, config.center_phone, config.center_email) if part
    )
    if contact:
        elements.append(Paragraph(escape(contact), subtitle_style))
    elements.append(Paragraph(f"<b>PAYMENT RECEIPT {entry.receipt_number}</b>", styles['Heading3']))
    elements.append(Spacer(1, 0.1 * inch))

    # Payment details
    details = [
        ['Student', student.full_name],
        ['Class Level', record.class_level or student.class_level],
        ['Billing Period', record.billing_period],
        ['Payment Date', config.format_date(entry.payment_date)],
        ['Payment Method', entry.get_payment_method_display()],
        ['Installment', f"#{entry.sequence}"],
        ['Received By', entry.received_by or '-'],
    ]
    if student.parent_name:
        details.insert(1, ['Parent / Guardian', student.parent_name])

    details_table = Table(details, colWidths=[1.4 * inch, 3.2 * inch])
    details_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('ROWBACKGROUNDS', (0, 0), (-1, -1), [colors.white, colors.HexColor('#F5F5F5')]),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    elements.append(details_table)
    elements.append(Spacer(1, 0.2 * inch))

    # Amounts
    amounts = [
        ['Description', 'Amount'],
        ['Amount received', config.format_money(entry.amount)],
        ['Total due for period', config.format_money(record.total_amount)],
        ['Total paid to date', config.format_money(summary.amount_paid)],
        ['Balance', config.format_money(summary.balance)],
    ]
    if summary.overpayment > 0:
        amounts.append(['Overpayment', config.format_money(summary.overpayment)])

    amounts_table = Table(amounts, colWidths=[2.8 * inch, 1.8 * inch])
    amounts_table.setStyle(TableStyle([
        # Header
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 8),

        # Data rows
        ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
        ('FONTNAME', (0, 1), (-1, 1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    elements.append(amounts_table)
    elements.append(Spacer(1, 0.2 * inch))

    status_label = dict(record.STATUS_CHOICES).get(summary.status, summary.status)
    elements.append(Paragraph(f"<b>Status:</b> {status_label}", styles['Normal']))
    if entry.notes:
        elements.append(Paragraph(f"<b>Notes:</b> {escape(entry.notes)}", styles['Normal']))

    doc.build(elements)

    pdf = buffer.getvalue()
    buffer.close()

    logger.debug(f"Built receipt PDF {entry.receipt_number} ({len(pdf)} bytes)")
    return pdf
