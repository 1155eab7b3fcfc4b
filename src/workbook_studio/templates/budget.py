"""Budget & Expense Tracker: monthly expenses, income and a summary tab."""

from __future__ import annotations

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from workbook_studio.config import currency_format, currency_symbol
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
    write_text,
)

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

HEADER_ROW = 4
DATA_START_ROW = 5
STRIPE_FILL = "#F9FAFB"
TOTAL_FILL = "#EBF5FB"
BUDGET_FILL = "#FFF9E6"

CURRENCY_OPTIONS = options(
    ("AUD ($)", "AUD"),
    ("USD ($)", "USD"),
    ("GBP (£)", "GBP"),
    ("EUR (€)", "EUR"),
    ("CAD ($)", "CAD"),
)


def _tracker_sheet(
    workbook: Workbook,
    title: str,
    subtitle: str,
    config: TemplateConfig,
    categories: list[str],
    months: int,
    with_budget: bool,
) -> tuple[Worksheet, int]:
    """Write one monthly tracker sheet and return it with its TOTAL row number."""
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    number_format = currency_format(currency_symbol(config["currency"]))
    total_col = months + 2
    last_col = months + 3 if with_budget else months + 2
    last_month_letter = get_column_letter(months + 1)

    sheet = workbook.create_sheet(title)
    sheet.freeze_panes = "B5"
    sheet.sheet_format.defaultColWidth = 14
    sheet.column_dimensions["A"].width = 28

    title_cell = merge_title(
        sheet, 1, last_col, f"{config['companyName']} — {config['reportTitle']}", header, height=30
    )
    title_cell.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=14)
    merge_title(sheet, 2, last_col, subtitle, accent, height=20)
    sheet.row_dimensions[3].height = 6

    headings = ["Category", *MONTH_NAMES[:months], "Total"]
    if with_budget:
        headings.append("Budget")
    sheet.row_dimensions[HEADER_ROW].height = 20
    for col, heading in enumerate(headings, start=1):
        cell = sheet.cell(row=HEADER_ROW, column=col, value=heading)
        apply_header_style(cell, header)
        cell.alignment = LEFT if col == 1 else CENTER

    for index, category in enumerate(categories):
        row = DATA_START_ROW + index
        sheet.row_dimensions[row].height = 18
        stripe = STRIPE_FILL if index % 2 == 0 else None
        apply_data_style(write_text(sheet, row, 1, category))
        for col in range(2, months + 2):
            cell = sheet.cell(row=row, column=col, value=0)
            cell.number_format = number_format
            apply_data_style(cell, stripe)
            cell.alignment = RIGHT

        total = sheet.cell(row=row, column=total_col, value=f"=SUM(B{row}:{last_month_letter}{row})")
        total.number_format = number_format
        apply_data_style(total, TOTAL_FILL)
        total.font = Font(name="Calibri", bold=True, size=10)
        total.alignment = RIGHT

        if with_budget:
            budget = sheet.cell(row=row, column=months + 3, value=0)
            budget.number_format = number_format
            apply_data_style(budget, BUDGET_FILL)
            budget.alignment = RIGHT

    totals_row = DATA_START_ROW + len(categories)
    sheet.row_dimensions[totals_row].height = 22
    label = sheet.cell(row=totals_row, column=1, value="TOTAL")
    apply_header_style(label, accent)
    label.alignment = LEFT
    last_data_row = totals_row - 1
    for col in range(2, last_col + 1):
        letter = get_column_letter(col)
        cell = sheet.cell(
            row=totals_row, column=col, value=f"=SUM({letter}{DATA_START_ROW}:{letter}{last_data_row})"
        )
        cell.number_format = number_format
        apply_header_style(cell, accent)
        cell.alignment = RIGHT

    return sheet, totals_row


def generate_budget_workbook(config: TemplateConfig) -> Workbook:
    months = min(int(config["months"]) or 12, 12)
    total_letter = get_column_letter(months + 2)
    number_format = currency_format(currency_symbol(config["currency"]))

    workbook = Workbook()
    workbook.remove(workbook.active)
    workbook.properties.creator = str(config["companyName"])

    _, expense_total_row = _tracker_sheet(
        workbook, "Expenses", "EXPENSE TRACKER", config, list(config["categories"]), months, with_budget=True
    )
    _, income_total_row = _tracker_sheet(
        workbook, "Income", "INCOME TRACKER", config, list(config["incomeCategories"]), months, with_budget=False
    )

    summary = workbook.create_sheet("Summary")
    for letter, width in zip("ABCD", (30, 18, 18, 18)):
        summary.column_dimensions[letter].width = width
    title = merge_title(
        summary, 1, 4, f"{config['companyName']} — Financial Summary", str(config["headerColor"]), height=30
    )
    title.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=14)

    income_row, expenses_row = 4, 5
    rows = [
        ["", "Budget", "Actual", "Variance"],
        ["Total Income", f"='Income'!{total_letter}{income_total_row}", "—", "—"],
        ["Total Expenses", f"='Expenses'!{total_letter}{expense_total_row}", "—", "—"],
        ["Net Position", f"=B{income_row}-B{expenses_row}", "—", "—"],
    ]
    for offset, values in enumerate(rows):
        row = 3 + offset
        summary.row_dimensions[row].height = 20
        for col, value in enumerate(values, start=1):
            cell = summary.cell(row=row, column=col, value=value)
            if offset == 0:
                apply_header_style(cell, str(config["accentColor"]))
                cell.alignment = CENTER
                continue
            if value.startswith("="):
                cell.number_format = number_format
            apply_data_style(cell, STRIPE_FILL if offset % 2 == 0 else None)
            cell.alignment = RIGHT if col > 1 else LEFT

    return workbook


BUDGET_TEMPLATE = TemplateDefinition(
    id="budget",
    name="Budget & Expense Tracker",
    description="Monthly expense tracker with category breakdowns, totals, and a summary dashboard tab.",
    category="finance",
    icon="💰",
    tags=("finance", "budget", "expenses", "monthly"),
    fields=(
        ConfigField("companyName", "Company / Name", FieldType.TEXT, "Acme Corp",
                    placeholder="Your company or name", group="Branding"),
        ConfigField("reportTitle", "Report Title", FieldType.TEXT, "Annual Budget Tracker",
                    placeholder="e.g. FY2025 Budget", group="Branding"),
        ConfigField("headerColor", "Header Colour", FieldType.COLOR, "#1E3A5F", group="Branding"),
        ConfigField("accentColor", "Accent Colour", FieldType.COLOR, "#2E86AB", group="Branding"),
        ConfigField("currency", "Currency", FieldType.SELECT, "AUD", options=CURRENCY_OPTIONS, group="Settings"),
        ConfigField("months", "Number of Months", FieldType.NUMBER, 12, min=1, max=12, group="Settings"),
        ConfigField(
            "categories",
            "Expense Categories",
            FieldType.TAGS,
            ["Salaries", "Software & Licences", "Travel", "Marketing", "Infrastructure", "Miscellaneous"],
            min=1,
            group="Settings",
        ),
        ConfigField(
            "incomeCategories",
            "Income Categories",
            FieldType.TAGS,
            ["Consulting Revenue", "Support Contracts", "Other Income"],
            min=1,
            group="Settings",
        ),
    ),
    builder=generate_budget_workbook,
)
