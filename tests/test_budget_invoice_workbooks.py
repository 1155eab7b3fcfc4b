from __future__ import annotations

import io
from datetime import date

import pytest
from openpyxl import load_workbook

from workbook_studio.templates import TEMPLATES, FieldType, generate_workbook, get_template, validate_config
from workbook_studio.templates.invoice import generate_invoice_workbook


def _merged(sheet) -> set[str]:
    return {str(cell_range) for cell_range in sheet.merged_cells.ranges}


def test_budget_two_month_layout() -> None:
    workbook = generate_workbook("budget", {"months": 2, "categories": ["Rent", "Travel"]})
    assert workbook.sheetnames == ["Expenses", "Income", "Summary"]

    expenses = workbook["Expenses"]
    assert expenses.freeze_panes == "B5"
    assert expenses["A1"].value == "Acme Corp — Annual Budget Tracker"
    assert "A1:E1" in _merged(expenses)
    assert expenses["A2"].value == "EXPENSE TRACKER"
    assert [expenses.cell(row=4, column=col).value for col in range(1, 6)] == [
        "Category", "Jan", "Feb", "Total", "Budget",
    ]
    assert expenses["A5"].value == "Rent"
    assert expenses["A6"].value == "Travel"
    assert expenses["B5"].value == 0
    assert expenses["D5"].value == "=SUM(B5:C5)"
    assert expenses["D6"].value == "=SUM(B6:C6)"
    assert expenses["E5"].value == 0

    assert expenses["A7"].value == "TOTAL"
    assert expenses["B7"].value == "=SUM(B5:B6)"
    assert expenses["D7"].value == "=SUM(D5:D6)"
    assert expenses["E7"].value == "=SUM(E5:E6)"


def test_budget_income_sheet_has_totals_and_no_budget_column() -> None:
    workbook = generate_workbook("budget", {"months": 3})
    income = workbook["Income"]
    assert [income.cell(row=4, column=col).value for col in range(1, 6)] == [
        "Category", "Jan", "Feb", "Mar", "Total",
    ]
    assert income.cell(row=4, column=6).value is None
    assert income["A5"].value == "Consulting Revenue"
    assert income["E5"].value == "=SUM(B5:D5)"
    assert income["A8"].value == "TOTAL"
    assert income["E8"].value == "=SUM(E5:E7)"


def test_budget_summary_references_tracker_totals() -> None:
    workbook = generate_workbook("budget", {"months": 2, "categories": ["Rent", "Travel"]})
    summary = workbook["Summary"]
    assert summary["A1"].value == "Acme Corp — Financial Summary"
    assert [summary.cell(row=3, column=col).value for col in range(2, 5)] == ["Budget", "Actual", "Variance"]
    assert summary["A4"].value == "Total Income"
    assert summary["B4"].value == "='Income'!D8"
    assert summary["A5"].value == "Total Expenses"
    assert summary["B5"].value == "='Expenses'!D7"
    assert summary["A6"].value == "Net Position"
    assert summary["B6"].value == "=B4-B5"
    assert summary["C6"].value == "—"


def test_budget_currency_number_format() -> None:
    workbook = generate_workbook("budget", {"currency": "GBP", "months": 1})
    assert workbook["Expenses"]["B5"].number_format == '"£"#,##0.00'
    assert workbook["Expenses"]["C5"].value == "=SUM(B5:B5)"


def test_budget_colours_come_from_config() -> None:
    workbook = generate_workbook("budget", {"headerColor": "#112233", "accentColor": "#445566"})
    expenses = workbook["Expenses"]
    assert expenses["A1"].fill.start_color.rgb == "FF112233"
    assert expenses["A2"].fill.start_color.rgb == "FF445566"
    assert expenses["A4"].fill.start_color.rgb == "FF112233"


def test_invoice_default_layout() -> None:
    workbook = generate_workbook("invoice", {})
    assert workbook.sheetnames == ["Invoice"]
    sheet = workbook["Invoice"]

    assert sheet["A1"].value == "Acme Consulting Pty Ltd"
    assert sheet["A2"].value == "ABN 12 345 678 901"
    assert sheet["D2"].value == "billing@acme.com.au  |  +61 3 9000 0000"
    assert sheet["A3"].value == "INVOICE"
    assert sheet["A5"].value == "BILL TO"
    assert sheet["E5"].value == "INV-0001"
    assert sheet["D6"].value == "Date"
    assert sheet["E6"].number_format == "DD/MM/YYYY"
    assert sheet["D8"].value == "Payment Terms"
    assert sheet["E8"].value == "Net 30 days"

    assert [sheet.cell(row=10, column=col).value for col in range(1, 7)] == [
        "#", "Description", "Qty", "Unit Rate", "Amount", "Notes",
    ]
    assert sheet["A11"].value == 1
    assert sheet["E11"].value == "=C11*D11"
    assert sheet["A20"].value == 10
    assert sheet["E20"].value == "=C20*D20"
    assert sheet["A21"].value is None

    assert sheet["A22"].value == "SUBTOTAL"
    assert sheet["E22"].value == "=SUM(E11:E20)"
    assert sheet["A23"].value == "GST (10%)"
    assert sheet["E23"].value == "=E22*0.1"
    assert sheet["A24"].value == "TOTAL DUE"
    assert sheet["E24"].value == "=E22+E23"

    assert sheet["A26"].value == "PAYMENT DETAILS"
    assert sheet["A27"].value == "BSB: 123-456  Account: 123456789"
    assert sheet["A28"].value == "Bank: Commonwealth Bank of Australia"
    assert sheet["A30"].value == "NOTES & TERMS"
    assert "A31:F33" in _merged(sheet)
    assert sheet["A34"].value.startswith("Acme Consulting Pty Ltd  |  123 Collins St")

    assert sheet.page_setup.orientation == "portrait"
    assert sheet.sheet_properties.pageSetUpPr.fitToPage


def test_invoice_rows_and_tax_follow_config() -> None:
    workbook = generate_workbook(
        "invoice",
        {"lineItems": 3, "taxRate": 7.5, "taxLabel": "VAT", "documentType": "Quote", "currency": "EUR"},
    )
    sheet = workbook["Quote"]
    assert sheet["A3"].value == "QUOTE"
    assert sheet["E13"].value == "=C13*D13"
    assert sheet["A15"].value == "SUBTOTAL"
    assert sheet["E15"].value == "=SUM(E11:E13)"
    assert sheet["A16"].value == "VAT (7.5%)"
    assert sheet["E16"].value == "=E15*0.075"
    assert sheet["E17"].value == "=E15+E16"
    assert sheet["D11"].number_format == '"€"#,##0.00'


def test_invoice_zero_tax() -> None:
    sheet = generate_workbook("invoice", {"taxRate": 0})["Invoice"]
    assert sheet["A23"].value == "GST (0%)"
    assert sheet["E23"].value == "=E22*0"


def test_invoice_date_is_today() -> None:
    config = validate_config(get_template("invoice"), {})
    sheet = generate_invoice_workbook(config)["Invoice"]
    value = sheet["E6"].value
    assert value is not None
    assert (value.date() if hasattr(value, "date") else value) == date.today()


def test_invoice_bank_details_single_line() -> None:
    sheet = generate_workbook("invoice", {"bankDetails": "PayID: billing@acme.com.au"})["Invoice"]
    assert sheet["A27"].value == "PayID: billing@acme.com.au"
    assert sheet["A29"].value == "NOTES & TERMS"


@pytest.mark.parametrize("template_id", ["budget", "invoice", "gantt", "rbac", "azure-calculator", "user-stories"])
def test_every_template_builds_with_defaults(template_id: str) -> None:
    workbook = generate_workbook(template_id, {})
    assert workbook.sheetnames
    assert workbook.properties.creator


INJECTED = '=HYPERLINK("http://example.invalid","click")'


@pytest.mark.parametrize("template_id", [template.id for template in TEMPLATES])
def test_formula_like_config_text_is_stored_as_text(template_id: str) -> None:
    config: dict[str, object] = {}
    for field in get_template(template_id).fields:
        if field.type in (FieldType.TEXT, FieldType.TEXTAREA):
            config[field.key] = INJECTED
        elif field.type is FieldType.TAGS:
            config[field.key] = [INJECTED, "=1+1"]

    buffer = io.BytesIO()
    generate_workbook(template_id, config).save(buffer)
    workbook = load_workbook(io.BytesIO(buffer.getvalue()))

    literal_hits = 0
    for sheet in workbook.worksheets:
        for row in sheet.iter_rows():
            for cell in row:
                if cell.data_type == "f":
                    assert "example.invalid" not in str(cell.value), (sheet.title, cell.coordinate)
                    assert cell.value != "=1+1", (sheet.title, cell.coordinate)
                elif cell.value == INJECTED:
                    literal_hits += 1
    assert literal_hits > 0


def test_formula_like_invoice_text_keeps_its_position() -> None:
    buffer = io.BytesIO()
    generate_workbook("invoice", {"companyName": "=2+2", "taxLabel": "=TAX", "notes": "=SUM(1)"}).save(buffer)
    sheet = load_workbook(io.BytesIO(buffer.getvalue()))["Invoice"]

    assert (sheet["A1"].value, sheet["A1"].data_type) == ("=2+2", "s")
    assert (sheet["A23"].value, sheet["A23"].data_type) == ("=TAX (10%)", "s")
    assert (sheet["A31"].value, sheet["A31"].data_type) == ("=SUM(1)", "s")
    assert sheet["E23"].data_type == "f"
