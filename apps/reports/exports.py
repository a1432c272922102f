# reports/exports.py

"""
Excel export of the financial report (openpyxl).
"""

from datetime import datetime
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from core.utils import is_zero_decimal_currency
from .reports import summarize_financial_report

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

HEADERS = [
    '#', 'Student', 'Class Level', 'Billing Records', 'Total Billed',
    'Total Paid', 'Balance', 'Status', 'Parent Contact'
]
COLUMN_WIDTHS = [5, 28, 14, 10, 16, 16, 16, 12, 18]
MONEY_COLUMNS = (5, 6, 7)


def build_financial_workbook(report, config, filters=None):
    """
    Args:
        report (list): rows from get_financial_report()
        config (CenterConfig): center name and currency
        filters (dict): filters used, echoed in the subtitle

    Returns:
        bytes: the .xlsx file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Financial Report"

    # Define styles
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=12)
    header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    thin = Side(style='thin', color='000000')
    border_style = Border(left=thin, right=thin, top=thin, bottom=thin)

    last_column = get_column_letter(len(HEADERS))
    money_format = '#,##0' if is_zero_decimal_currency(config.currency) else '#,##0.00'

    # Title row
    ws.merge_cells(f'A1:{last_column}1')
    title_cell = ws['A1']
    title_cell.value = f"{config.center_name} - Financial Report"
    title_cell.font = Font(bold=True, size=16, color="4472C4")
    title_cell.alignment = Alignment(horizontal="center", vertical="center")

    # Subtitle with date and filters
    ws.merge_cells(f'A2:{last_column}2')
    subtitle_cell = ws['A2']
    filter_text = f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M')} | Currency: {config.currency}"
    for key, label in (('class_level', 'Class'), ('period_from', 'From'), ('period_to', 'To')):
        if filters and filters.get(key):
            filter_text += f" | {label}: {filters[key]}"
    subtitle_cell.value = filter_text
    subtitle_cell.font = Font(size=10, italic=True)
    subtitle_cell.alignment = Alignment(horizontal="center")

    ws.append([])  # Empty row

    # Headers
    ws.append(HEADERS)
    for cell in ws[4]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_alignment
        cell.border = border_style

    # Data rows
    for idx, row in enumerate(report, start=1):
        ws.append([
            idx,
            row['student']['full_name'],
            row['student']['class_level'],
            row['billing_records'],
            row['total_billed'],
            row['total_paid'],
            row['balance'],
            row['status'].title(),
            row['parent_contact'],
        ])
        for cell in ws[ws.max_row]:
            cell.border = border_style
            cell.alignment = Alignment(vertical="center", wrap_text=True)
        for column in MONEY_COLUMNS:
            ws.cell(row=ws.max_row, column=column).number_format = money_format

    for index, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    # Summary at bottom
    totals = summarize_financial_report(report)
    summary_row = ws.max_row + 2
    summary = [
        ('Students:', totals['students'], None),
        ('Total Billed:', totals['total_billed'], money_format),
        ('Total Paid:', totals['total_paid'], money_format),
        ('Outstanding:', totals['balance'], money_format),
        ('Collection Rate (%):', totals['collection_rate'], '0.0'),
    ]
    for offset, (label, value, number_format) in enumerate(summary):
        label_cell = ws.cell(row=summary_row + offset, column=1, value=label)
        value_cell = ws.cell(row=summary_row + offset, column=2, value=value)
        label_cell.font = Font(bold=True)
        value_cell.font = Font(bold=True)
        if number_format:
            value_cell.number_format = number_format

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
