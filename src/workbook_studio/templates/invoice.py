"""Invoice / Quote: single-sheet document with line items, tax and payment details."""

from __future__ import annotations

from datetime import date

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from workbook_studio.config import EXCEL_DATE_FORMAT, currency_format, currency_symbol
from workbook_studio.templates.budget import CURRENCY_OPTIONS
from workbook_studio.templates.schema import (
    ConfigField,
    FieldType,
    TemplateConfig,
    TemplateDefinition,
    options,
)
from workbook_studio.templates.styles import (
    CENTER,
    LEFT,
    RIGHT,
    apply_data_style,
    apply_header_style,
    merge_title,
    set_column_widths,
    write_text,
)

LAST_COL = 6
LINE_HEADERS = ("#", "Description", "Qty", "Unit Rate", "Amount", "Notes")
MUTED = "FF666666"
STRIPE_FILL = "#F9FAFB"


def _format_rate(rate: float) -> str:
    return f"{rate:.10g}"


def generate_invoice_workbook(config: TemplateConfig) -> Workbook:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    number_format = currency_format(currency_symbol(config["currency"]))
    tax_rate = float(config["taxRate"])
    line_count = int(config["lineItems"]) or 10

    workbook = Workbook()
    workbook.remove(workbook.active)
    workbook.properties.creator = str(config["companyName"])
    sheet = workbook.create_sheet(str(config["documentType"]))
    sheet.page_setup.paperSize = sheet.PAPERSIZE_A4
    sheet.page_setup.orientation = "portrait"
    sheet.sheet_properties.pageSetUpPr.fitToPage = True
    set_column_widths(sheet, (10, 40, 12, 16, 16, 28))

    r = 1
    banner = merge_title(sheet, r, LAST_COL, str(config["companyName"]), header, height=36)
    banner.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=18)
    r += 1

    sheet.merge_cells(start_row=r, start_column=1, end_row=r, end_column=3)
    abn = write_text(sheet, r, 1, str(config["companyAbn"]))
    abn.font = Font(name="Calibri", size=9, color=MUTED)
    abn.alignment = LEFT
    sheet.merge_cells(start_row=r, start_column=4, end_row=r, end_column=LAST_COL)
    contact = write_text(sheet, r, 4, f"{config['companyEmail']}  |  {config['companyPhone']}")
    contact.font = Font(name="Calibri", size=9, color=MUTED)
    contact.alignment = RIGHT
    sheet.row_dimensions[r].height = 16
    r += 1

    doc_title = merge_title(sheet, r, LAST_COL, str(config["documentType"]).upper(), accent, height=24)
    doc_title.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=13)
    r += 2

    # Bill-to on the left, document metadata on the right.
    meta = [
        ("BILL TO", "Client Company Name", "Invoice #", "INV-0001"),
        ("", "Client Address Line 1", "Date", date.today()),
        (None, "Client Address Line 2", "Due Date", ""),
        (None, "", "Payment Terms", str(config["paymentTerms"])),
    ]
    for index, (left, client, label, value) in enumerate(meta):
        if left is not None:
            cell = sheet.cell(row=r, column=1, value=left)
            if index == 0:
                apply_header_style(cell, accent)
                cell.alignment = Alignment(horizontal="center")
            else:
                apply_data_style(cell)
        sheet.merge_cells(start_row=r, start_column=2, end_row=r, end_column=3)
        client_cell = sheet.cell(row=r, column=2, value=client)
        apply_data_style(client_cell)
        if index == 0:
            client_cell.font = Font(name="Calibri", bold=True, size=11)
        sheet.cell(row=r, column=4, value=label).font = Font(name="Calibri", bold=True, size=10)
        sheet.merge_cells(start_row=r, start_column=5, end_row=r, end_column=LAST_COL)
        value_cell = write_text(sheet, r, 5, value)
        if isinstance(value, date):
            value_cell.number_format = EXCEL_DATE_FORMAT
        apply_data_style(value_cell)
        r += 1
    r += 1

    sheet.row_dimensions[r].height = 20
    for col, heading in enumerate(LINE_HEADERS, start=1):
        cell = sheet.cell(row=r, column=col, value=heading)
        apply_header_style(cell, header)
        cell.alignment = CENTER if col > 2 else LEFT
    r += 1

    line_start = r
    for index in range(line_count):
        row = line_start + index
        stripe = STRIPE_FILL if index % 2 == 0 else None
        sheet.row_dimensions[row].height = 18

        number = sheet.cell(row=row, column=1, value=index + 1)
        number.alignment = CENTER
        apply_data_style(number, stripe)
        apply_data_style(sheet.cell(row=row, column=2, value=""), stripe)

        qty = sheet.cell(row=row, column=3, value=0)
        qty.number_format = "0.00"
        qty.alignment = CENTER
        apply_data_style(qty, stripe)

        rate = sheet.cell(row=row, column=4, value=0)
        rate.number_format = number_format
        rate.alignment = RIGHT
        apply_data_style(rate, stripe)

        amount = sheet.cell(row=row, column=5, value=f"=C{row}*D{row}")
        amount.number_format = number_format
        amount.alignment = RIGHT
        apply_data_style(amount, "#EBF5FB" if index % 2 == 0 else "#F0F8FF")

        apply_data_style(sheet.cell(row=row, column=6, value=""), stripe)
    line_end = line_start + line_count - 1
    r = line_end + 2

    subtotal_row = r
    tax_row = r + 1
    total_row = r + 2
    totals = [
        (subtotal_row, "SUBTOTAL", f"=SUM(E{line_start}:E{line_end})"),
        (tax_row, f"{config['taxLabel']} ({_format_rate(tax_rate)}%)", f"=E{subtotal_row}*{_format_rate(tax_rate / 100)}"),
        (total_row, "TOTAL DUE", f"=E{subtotal_row}+E{tax_row}"),
    ]
    for row, label, formula in totals:
        sheet.merge_cells(start_row=row, start_column=1, end_row=row, end_column=4)
        label_cell = write_text(sheet, row, 1, label)
        amount = sheet.cell(row=row, column=5, value=formula)
        amount.number_format = number_format
        label_cell.alignment = RIGHT
        amount.alignment = RIGHT
        if row == total_row:
            sheet.row_dimensions[row].height = 24
            for cell in (label_cell, amount, sheet.cell(row=row, column=6)):
                apply_header_style(cell, accent, size=12)
            continue
        sheet.row_dimensions[row].height = 18
        apply_data_style(label_cell)
        apply_data_style(amount, "#EBF5FB")
        apply_data_style(sheet.cell(row=row, column=6))
        if row == subtotal_row:
            label_cell.font = Font(name="Calibri", bold=True, size=10)
            amount.font = Font(name="Calibri", bold=True, size=10)
    r = total_row + 2

    section = merge_title(sheet, r, LAST_COL, "PAYMENT DETAILS", header, height=18)
    section.alignment = LEFT
    r += 1
    for line in str(config["bankDetails"]).split("\n"):
        sheet.merge_cells(start_row=r, start_column=1, end_row=r, end_column=LAST_COL)
        apply_data_style(write_text(sheet, r, 1, line))
        sheet.row_dimensions[r].height = 16
        r += 1
    r += 1

    section = merge_title(sheet, r, LAST_COL, "NOTES & TERMS", header, height=18)
    section.alignment = LEFT
    r += 1
    sheet.merge_cells(start_row=r, start_column=1, end_row=r + 2, end_column=LAST_COL)
    notes = write_text(sheet, r, 1, str(config["notes"]))
    apply_data_style(notes)
    notes.font = Font(name="Calibri", size=10, italic=True)
    notes.alignment = Alignment(horizontal="left", vertical="top", wrap_text=True)
    r += 3

    footer = merge_title(
        sheet,
        r,
        LAST_COL,
        f"{config['companyName']}  |  {config['companyAddress']}  |  {config['companyEmail']}",
        header,
        height=16,
    )
    footer.font = Font(name="Calibri", size=9, color="FFCCCCCC")

    return workbook


INVOICE_TEMPLATE = TemplateDefinition(
    id="invoice",
    name="Invoice / Quote",
    description="Professional invoice or quote template with line items, tax, and payment details.",
    category="finance",
    icon="🧾",
    tags=("invoice", "quote", "billing", "finance"),
    fields=(
        ConfigField("companyName", "Your Company Name", FieldType.TEXT, "Acme Consulting Pty Ltd", group="Your Details"),
        ConfigField("companyAbn", "ABN / Company Reg.", FieldType.TEXT, "ABN 12 345 678 901", group="Your Details"),
        ConfigField("companyAddress", "Address", FieldType.TEXTAREA, "123 Collins St, Melbourne VIC 3000",
                    group="Your Details"),
        ConfigField("companyEmail", "Email", FieldType.TEXT, "billing@acme.com.au", group="Your Details"),
        ConfigField("companyPhone", "Phone", FieldType.TEXT, "+61 3 9000 0000", group="Your Details"),
        ConfigField("headerColor", "Header Colour", FieldType.COLOR, "#1E3A5F", group="Branding"),
        ConfigField("accentColor", "Accent Colour", FieldType.COLOR, "#2E86AB", group="Branding"),
        ConfigField(
            "documentType",
            "Document Type",
            FieldType.SELECT,
            "Invoice",
            options=options(
                ("Invoice", "Invoice"),
                ("Quote", "Quote"),
                ("Tax Invoice", "Tax Invoice"),
                ("Proforma Invoice", "Proforma Invoice"),
            ),
            group="Settings",
        ),
        ConfigField("currency", "Currency", FieldType.SELECT, "AUD", options=CURRENCY_OPTIONS, group="Settings"),
        ConfigField("taxRate", "Tax Rate (%)", FieldType.NUMBER, 10, min=0, max=100, group="Settings"),
        ConfigField("taxLabel", "Tax Label", FieldType.TEXT, "GST", placeholder="GST / VAT / Tax", group="Settings"),
        ConfigField("lineItems", "Number of Line Item Rows", FieldType.NUMBER, 10, min=3, max=30, group="Settings"),
        ConfigField("paymentTerms", "Payment Terms", FieldType.TEXT, "Net 30 days", group="Settings"),
        ConfigField(
            "bankDetails",
            "Bank / Payment Details",
            FieldType.TEXTAREA,
            "BSB: 123-456  Account: 123456789\nBank: Commonwealth Bank of Australia",
            group="Settings",
        ),
        ConfigField(
            "notes",
            "Notes / Terms",
            FieldType.TEXTAREA,
            "Thank you for your business. Please reference the invoice number when making payment.",
            group="Settings",
        ),
    ),
    builder=generate_invoice_workbook,
)
