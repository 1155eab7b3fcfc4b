"""Azure Platform Calculator: category cost blocks, environment breakdown and pricing reference.

Rows are either generic placeholders (manual mode) or one per resolved
resource (AI mode). In both modes every subtotal, grand total and
environment figure is a formula whose addresses come from the row cursor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from workbook_studio.api_models import AzureResource
from workbook_studio.config import (
    HOURS_PER_MONTH,
    MONTHS_PER_YEAR,
    PLACEHOLDER_ROWS_PER_CATEGORY,
    RESERVED_INSTANCE_DISCOUNT,
    currency_format,
    currency_symbol,
)
from workbook_studio.pricing import get_pricing_lookup
from workbook_studio.templates.schema import (
    ConfigField,
    FieldType,
    TemplateConfig,
    TemplateDefinition,
    options,
)
from workbook_studio.templates.styles import (
    CENTER,
    RIGHT,
    apply_data_style,
    apply_header_style,
    generated_stamp,
    merge_title,
    set_column_widths,
    solid_fill,
    write_text,
)

COST_SHEET = "Cost Estimate"
TOTAL_COLS = 9
FORMULA_COLS = (7, 8)
CATEGORY_FILL = "#034078"
GRID_BORDER = "FFE8E8E8"
NAVY_TEXT = "FF003087"
SAVINGS_TEXT = "FF27AE60"

STUB_NOTE = (
    "⚠️  STUB TEMPLATE — Replace unit costs with actual Azure pricing from "
    "https://azure.microsoft.com/en-au/pricing/calculator/"
)


@dataclass(frozen=True)
class CategoryBlock:
    """Row positions written for one category."""

    category: str
    first_row: int
    last_row: int
    subtotal_row: int


def group_by_category(resources: Sequence[AzureResource]) -> dict[str, list[AzureResource]]:
    """Group resources by category, keeping first-seen category order."""
    grouped: dict[str, list[AzureResource]] = {}
    for resource in resources:
        grouped.setdefault(resource.category, []).append(resource)
    return grouped


def _number(value: float) -> str:
    return f"{value:.10g}"


def _row_values(category: str, index: int, resource: Optional[AzureResource]) -> list[object]:
    if resource is None:
        return [f"{category} Resource {index + 1}", "", "", "", 1, 0, None, None, ""]
    return [
        resource.name,
        resource.sku_name,
        resource.service_name,
        resource.environment,
        resource.quantity,
        resource.unit_monthly_cost,
        None,
        None,
        resource.notes or "",
    ]


def _write_category_block(
    sheet: Worksheet,
    start_row: int,
    category: str,
    resources: Sequence[Optional[AzureResource]],
    header: str,
    number_format: str,
) -> tuple[CategoryBlock, int]:
    """Write one category band, its rows and subtotal; return the block and next free row."""
    r = start_row
    band = merge_title(sheet, r, TOTAL_COLS, f"▶  {category.upper()}", CATEGORY_FILL, size=10, height=18)
    band.alignment = Alignment(horizontal="left", vertical="center")
    r += 1

    first_row = r
    for index, resource in enumerate(resources):
        even = index % 2 == 0
        sheet.row_dimensions[r].height = 18
        values = _row_values(category, index, resource)
        values[6] = f"=E{r}*F{r}"
        values[7] = f"=G{r}*{MONTHS_PER_YEAR}"
        fills = [
            "#F0F7FF" if even else None,
            *(["#F9FAFB" if even else None] * 4),
            "#FFF9E6" if even else "#FEFDF5",
            "#EBF5FB" if even else "#F5FBFF",
            "#EBF5FB" if even else "#F5FBFF",
            "#F9FAFB" if even else None,
        ]
        for col, (value, fill) in enumerate(zip(values, fills), start=1):
            if col in FORMULA_COLS:
                cell = sheet.cell(row=r, column=col, value=value)
            else:
                cell = write_text(sheet, r, col, value)
            apply_data_style(cell, fill, border_color=GRID_BORDER)
            if col in (2, 4, 5):
                cell.alignment = CENTER
            elif col in (6, 7, 8):
                cell.alignment = RIGHT
                cell.number_format = number_format
        sheet.cell(row=r, column=5).number_format = "0"
        r += 1
    last_row = r - 1

    subtotal_row = r
    sheet.row_dimensions[r].height = 18
    sheet.merge_cells(start_row=r, start_column=1, end_row=r, end_column=4)
    subtotal_values = {
        1: f"{category} Subtotal",
        5: f"=SUM(E{first_row}:E{last_row})",
        6: "",
        7: f"=SUM(G{first_row}:G{last_row})",
        8: f"=SUM(H{first_row}:H{last_row})",
        9: "",
    }
    for col, value in subtotal_values.items():
        cell = write_text(sheet, r, col, value) if col == 1 else sheet.cell(row=r, column=col, value=value)
        apply_header_style(cell, header, size=10)
        cell.alignment = RIGHT
    sheet.cell(row=r, column=5).number_format = "0"
    sheet.cell(row=r, column=5).alignment = CENTER
    for col in (7, 8):
        sheet.cell(row=r, column=col).number_format = number_format

    block = CategoryBlock(category=category, first_row=first_row, last_row=last_row, subtotal_row=subtotal_row)
    return block, r + 2


def _write_total_row(
    sheet: Worksheet,
    row: int,
    label: str,
    monthly: str,
    annual: str,
    number_format: str,
    fill: str,
    font: Font,
    as_header: bool,
    height: float,
) -> None:
    sheet.row_dimensions[row].height = height
    sheet.merge_cells(start_row=row, start_column=1, end_row=row, end_column=6)
    cells = {1: label, 7: monthly, 8: annual, 9: None}
    for col, value in cells.items():
        cell = sheet.cell(row=row, column=col, value=value)
        if as_header:
            apply_header_style(cell, fill, size=10)
        else:
            apply_data_style(cell, fill, border_color=GRID_BORDER)
        cell.alignment = RIGHT
        if col in (1, 7, 8):
            cell.font = font
        if col in (7, 8):
            cell.number_format = number_format


def _write_cost_sheet(
    workbook: Workbook,
    config: TemplateConfig,
    resources: Optional[Sequence[AzureResource]],
) -> list[CategoryBlock]:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    currency = str(config["currency"])
    symbol = currency_symbol(currency)
    number_format = currency_format(symbol)

    sheet = workbook.create_sheet(COST_SHEET)
    sheet.freeze_panes = "A6"
    set_column_widths(sheet, (30, 18, 28, 16, 8, 16, 16, 16, 30))

    title = merge_title(sheet, 1, TOTAL_COLS, f"{config['projectName']}  —  Azure Cost Estimate", header, height=32)
    title.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=16)

    subtitle = merge_title(
        sheet,
        2,
        TOTAL_COLS,
        (
            f"Organisation: {config['companyName']}   |   Region: {config['region']}   |   "
            f"Currency: {currency}   |   Generated: {generated_stamp()}"
        ),
        accent,
        height=16,
    )
    subtitle.font = Font(name="Calibri", bold=True, color=NAVY_TEXT, size=9)

    if resources:
        lookup = get_pricing_lookup()
        note = (
            f"Unit costs resolved from the Azure retail pricing catalogue "
            f"({lookup.region}, {lookup.currency}, {lookup.generated_at}). "
            "Rows marked in Notes need manual pricing."
        )
    else:
        note = STUB_NOTE
    sheet.merge_cells(start_row=3, start_column=1, end_row=3, end_column=TOTAL_COLS)
    note_cell = sheet.cell(row=3, column=1, value=note)
    note_cell.font = Font(name="Calibri", size=9, italic=True, color="FF8B4513")
    note_cell.fill = solid_fill("#FFF3CD")
    note_cell.alignment = CENTER
    sheet.row_dimensions[3].height = 14

    headings = (
        "Resource / Service",
        "SKU / Tier",
        "Description",
        "Environment",
        "Qty",
        f"Unit Cost ({symbol}/mo)",
        f"Monthly Total ({symbol})",
        f"Annual Total ({symbol})",
        "Notes",
    )
    sheet.row_dimensions[5].height = 32
    for col, heading in enumerate(headings, start=1):
        cell = sheet.cell(row=5, column=col, value=heading)
        apply_header_style(cell, header, size=10)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    if resources:
        groups: dict[str, list[Optional[AzureResource]]] = dict(group_by_category(resources))
    else:
        groups = {
            category: [None] * PLACEHOLDER_ROWS_PER_CATEGORY for category in config["resourceCategories"]
        }

    r = 6
    blocks: list[CategoryBlock] = []
    for category, rows in groups.items():
        block, r = _write_category_block(sheet, r, category, rows, header, number_format)
        blocks.append(block)

    r += 1
    grand_row = r
    monthly = "=" + "+".join(f"G{block.subtotal_row}" for block in blocks) if blocks else "=0"
    navy = Font(name="Calibri", bold=True, size=11, color=NAVY_TEXT)
    _write_total_row(
        sheet, grand_row, "GRAND TOTAL (before contingency)", monthly, f"=G{grand_row}*{MONTHS_PER_YEAR}",
        number_format, accent, navy, as_header=True, height=24,
    )
    r += 1

    pct = float(config["contingencyPct"])
    contingency_row = r
    _write_total_row(
        sheet, contingency_row, f"Contingency ({_number(pct)}%)",
        f"=G{grand_row}*{_number(pct)}/100", f"=H{grand_row}*{_number(pct)}/100",
        number_format, "#FFF9E6", Font(name="Calibri", size=10), as_header=False, height=20,
    )
    r += 1

    present = [grand_row, contingency_row]
    if config["includeReserved"]:
        discount = _number(RESERVED_INSTANCE_DISCOUNT)
        _write_total_row(
            sheet, r, f"Reserved Instance Savings (est. {RESERVED_INSTANCE_DISCOUNT:.0%})",
            f"=G{grand_row}*{discount}", f"=H{grand_row}*{discount}",
            number_format, "#E9F7EF", Font(name="Calibri", size=10, color=SAVINGS_TEXT), as_header=False, height=20,
        )
        present.append(r)
        r += 1

    _write_total_row(
        sheet, r, "TOTAL ESTIMATE (incl. contingency)",
        "=" + "+".join(f"G{row}" for row in present), f"=G{r}*{MONTHS_PER_YEAR}",
        number_format, header, Font(name="Calibri", bold=True, size=12, color="FFFFFFFF"), as_header=True, height=28,
    )
    return blocks


def _write_environment_sheet(
    workbook: Workbook,
    config: TemplateConfig,
    blocks: Sequence[CategoryBlock],
    resources: Optional[Sequence[AzureResource]],
) -> None:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    number_format = currency_format(currency_symbol(config["currency"]))

    environments = list(config["environments"])
    for resource in resources or ():
        if resource.environment not in environments:
            environments.append(resource.environment)
    last_col = len(environments) + 1

    sheet = workbook.create_sheet("By Environment")
    set_column_widths(sheet, [26] + [18] * len(environments))
    merge_title(sheet, 1, last_col, "Cost Breakdown by Environment", header, height=24)

    sheet.row_dimensions[2].height = 20
    for col, heading in enumerate(["Resource Category", *environments], start=1):
        cell = write_text(sheet, 2, col, heading)
        apply_header_style(cell, accent, font_color=NAVY_TEXT, size=10)
        cell.alignment = CENTER

    source = f"'{COST_SHEET}'!"
    for index, block in enumerate(blocks):
        row = 3 + index
        sheet.row_dimensions[row].height = 18
        name = write_text(sheet, row, 1, block.category)
        apply_data_style(name, "#F0F7FF" if index % 2 == 0 else None, border_color=GRID_BORDER)
        name.font = Font(name="Calibri", bold=True, size=10)
        for col in range(2, last_col + 1):
            env_ref = f"{get_column_letter(col)}$2"
            cell = sheet.cell(
                row=row,
                column=col,
                value=(
                    f"=SUMIFS({source}$G${block.first_row}:$G${block.last_row},"
                    f"{source}$D${block.first_row}:$D${block.last_row},{env_ref})"
                ),
            )
            cell.number_format = number_format
            cell.alignment = RIGHT
            apply_data_style(cell, "#F9FAFB" if index % 2 == 0 else None, border_color=GRID_BORDER)

    total_row = 3 + len(blocks)
    label = sheet.cell(row=total_row, column=1, value="TOTAL")
    apply_header_style(label, header, size=10)
    for col in range(2, last_col + 1):
        letter = get_column_letter(col)
        value = f"=SUM({letter}3:{letter}{total_row - 1})" if blocks else 0
        cell = sheet.cell(row=total_row, column=col, value=value)
        apply_header_style(cell, header, size=10)
        cell.number_format = number_format
        cell.alignment = RIGHT


def _write_pricing_reference(workbook: Workbook, config: TemplateConfig) -> None:
    lookup = get_pricing_lookup()
    number_format = currency_format(currency_symbol(lookup.currency))
    headings = ("Service", "SKU", "Family", "Unit", f"Price ({lookup.currency})", "Monthly Equivalent")

    sheet = workbook.create_sheet("Pricing Reference")
    set_column_widths(sheet, (34, 30, 20, 14, 16, 20))
    for col, heading in enumerate(headings, start=1):
        cell = sheet.cell(row=1, column=col, value=heading)
        apply_header_style(cell, str(config["headerColor"]), size=10)
        cell.alignment = CENTER

    row = 1
    for key, entry in lookup.pricing.items():
        row += 1
        service_name = key.split("|", 1)[0]
        values = (
            service_name,
            entry.sku,
            entry.family,
            entry.unit,
            entry.price,
            f'=IF(ISNUMBER(SEARCH("Hour",D{row})),E{row}*{HOURS_PER_MONTH},E{row})',
        )
        for col, value in enumerate(values, start=1):
            cell = sheet.cell(row=row, column=col, value=value)
            apply_data_style(cell, "#F9FAFB" if row % 2 == 0 else None, border_color=GRID_BORDER)
            if col >= 5:
                cell.number_format = number_format
                cell.alignment = RIGHT

    sheet.freeze_panes = "A2"
    sheet.auto_filter.ref = f"A1:{get_column_letter(len(headings))}{row}"


def generate_azure_calculator_workbook(
    config: TemplateConfig,
    resources: Optional[Sequence[AzureResource]] = None,
) -> Workbook:
    workbook = Workbook()
    workbook.remove(workbook.active)
    workbook.properties.creator = str(config["companyName"])

    blocks = _write_cost_sheet(workbook, config, resources)
    _write_environment_sheet(workbook, config, blocks, resources)
    _write_pricing_reference(workbook, config)
    return workbook


AZURE_CALCULATOR_TEMPLATE = TemplateDefinition(
    id="azure-calculator",
    name="Azure Platform Calculator",
    description=(
        "Azure resource cost estimation template with resource types, SKUs, regions, and monthly/annual "
        "cost projections. Describe your platform to the AI assistant to price it from the catalogue."
    ),
    category="azure",
    icon="☁️",
    tags=("azure", "cloud", "cost", "calculator", "infrastructure"),
    fields=(
        ConfigField("projectName", "Project / Initiative Name", FieldType.TEXT, "Azure Platform Modernisation",
                    group="Project"),
        ConfigField("companyName", "Organisation", FieldType.TEXT, "Acme Corp", group="Project"),
        ConfigField(
            "currency",
            "Currency",
            FieldType.SELECT,
            "AUD",
            options=options(("AUD ($)", "AUD"), ("USD ($)", "USD"), ("GBP (£)", "GBP")),
            group="Project",
        ),
        ConfigField("headerColor", "Header Colour", FieldType.COLOR, "#0078D4", group="Branding"),
        ConfigField("accentColor", "Accent Colour", FieldType.COLOR, "#50E6FF", group="Branding"),
        ConfigField(
            "region",
            "Primary Azure Region",
            FieldType.SELECT,
            "australiaeast",
            options=options(
                ("Australia East", "australiaeast"),
                ("Australia Southeast", "australiasoutheast"),
                ("East US", "eastus"),
                ("West Europe", "westeurope"),
                ("UK South", "uksouth"),
                ("Southeast Asia", "southeastasia"),
            ),
            group="Settings",
        ),
        ConfigField("environments", "Environments", FieldType.TAGS, ["Production", "Development", "UAT"],
                    min=1, group="Settings"),
        ConfigField(
            "resourceCategories",
            "Resource Categories",
            FieldType.TAGS,
            ["Compute", "Storage", "Networking", "Databases", "AI & ML", "Security", "Monitoring"],
            min=1,
            group="Settings",
        ),
        ConfigField("contingencyPct", "Contingency (%)", FieldType.NUMBER, 15, min=0, max=50, group="Settings"),
        ConfigField("includeReserved", "Include Reserved Instance Savings", FieldType.TOGGLE, True,
                    group="Settings"),
    ),
    builder=generate_azure_calculator_workbook,
    supports_ai=True,
)
