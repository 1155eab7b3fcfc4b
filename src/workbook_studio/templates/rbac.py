"""RBAC Matrix: scopes by roles with permission dropdowns, a legend and a roles register."""

from __future__ import annotations

from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from workbook_studio.templates.schema import (
    ConfigField,
    FieldType,
    TemplateConfig,
    TemplateDefinition,
    options,
)
from workbook_studio.templates.styles import (
    CENTER,
    add_list_validation,
    apply_data_style,
    apply_header_style,
    generated_stamp,
    merge_title,
    set_column_widths,
    solid_fill,
    write_text,
)

PERMISSION_VALUES: dict[str, tuple[str, ...]] = {
    "CRUD": ("Full", "C/R/U/D", "R Only", "None"),
    "AllowDeny": ("✓", "✗"),
    "Levels": ("Full Access", "Read Only", "No Access"),
    "Azure": ("Owner", "Contributor", "Reader", "None"),
}

PERMISSION_COLORS: dict[str, str] = {
    "Full": "#E74C3C",
    "C/R/U/D": "#E67E22",
    "R Only": "#27AE60",
    "None": "#D5D5D5",
    "✓": "#27AE60",
    "✗": "#E74C3C",
    "Full Access": "#E74C3C",
    "Read Only": "#27AE60",
    "No Access": "#D5D5D5",
    "Owner": "#E74C3C",
    "Contributor": "#F39C12",
    "Reader": "#27AE60",
}
DEFAULT_PERMISSION_COLOR = "#AAAAAA"
BORDER = "FFD0D0D0"


def permission_values(mode: str) -> tuple[str, ...]:
    return PERMISSION_VALUES[mode]


def matrix_column_count(role_count: int, include_description: bool, include_justification: bool) -> int:
    """Columns to the right of the scope column."""
    return int(include_description) + role_count + int(include_justification)


def _header(cell: Cell, color: str) -> None:
    apply_header_style(cell, color, size=10, border_style="medium")
    cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)


def generate_rbac_workbook(config: TemplateConfig) -> Workbook:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    roles = list(config["roles"])
    scopes = list(config["resourceGroups"])
    include_description = bool(config["includeDescription"])
    include_justification = bool(config["includeJustification"])
    mode = str(config["permissionValues"])
    values = permission_values(mode)
    last_col = 1 + matrix_column_count(len(roles), include_description, include_justification)

    workbook = Workbook()
    workbook.remove(workbook.active)
    workbook.properties.creator = str(config["companyName"])

    sheet = workbook.create_sheet("RBAC Matrix")
    sheet.freeze_panes = "B4"
    widths = [24]
    if include_description:
        widths.append(30)
    widths.extend([16] * len(roles))
    if include_justification:
        widths.append(36)
    set_column_widths(sheet, widths)

    title = merge_title(sheet, 1, last_col, f"{config['projectName']}  —  RBAC Matrix", header, height=30)
    _header(title, header)
    title.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=15)

    sheet.merge_cells(start_row=2, start_column=1, end_row=2, end_column=last_col)
    meta = sheet.cell(
        row=2,
        column=1,
        value=(
            f"Organisation: {config['companyName']}   |   Environment: {config['azureEnvironment']}"
            f"   |   Generated: {generated_stamp()}"
        ),
    )
    meta.font = Font(name="Calibri", size=9, italic=True, color="FF555555")
    meta.fill = solid_fill("#F5F5F5")
    meta.alignment = CENTER
    sheet.row_dimensions[2].height = 16

    headings = ["Resource Group / Scope"]
    if include_description:
        headings.append("Role Description")
    headings.extend(roles)
    if include_justification:
        headings.append("Justification / Notes")
    sheet.row_dimensions[3].height = 40
    for col, heading in enumerate(headings, start=1):
        _header(write_text(sheet, 3, col, heading), header)

    first_role_col = 3 if include_description else 2
    last_role_col = first_role_col + len(roles) - 1
    for index, scope in enumerate(scopes):
        row = 4 + index
        stripe = "#F9FAFB" if index % 2 == 0 else None
        sheet.row_dimensions[row].height = 20
        scope_cell = write_text(sheet, row, 1, scope)
        apply_data_style(scope_cell, "#F0F7FF" if index % 2 == 0 else "#FFFFFF", border_color=BORDER)
        scope_cell.font = Font(name="Calibri", bold=True, size=10)
        for col in range(2, last_col + 1):
            cell = sheet.cell(row=row, column=col, value="")
            apply_data_style(cell, stripe, border_color=BORDER)
            if first_role_col <= col <= last_role_col:
                cell.alignment = CENTER

    if scopes:
        add_list_validation(
            sheet,
            values,
            f"{get_column_letter(first_role_col)}4:{get_column_letter(last_role_col)}{3 + len(scopes)}",
            error_title="Invalid Value",
            error=f"Please select from: {', '.join(values)}",
        )

    legend = workbook.create_sheet("Legend & Key")
    set_column_widths(legend, (24, 40))
    merge_title(legend, 1, 2, "RBAC Permission Key", header, height=24)
    merge_title(legend, 2, 2, f"Permission Mode: {mode}", accent, height=18)
    for index, value in enumerate(values):
        row = 3 + index
        legend.row_dimensions[row].height = 18
        key = legend.cell(row=row, column=1, value=value)
        key.fill = solid_fill(PERMISSION_COLORS.get(value, DEFAULT_PERMISSION_COLOR))
        key.font = Font(name="Calibri", bold=True, size=10, color="FFFFFFFF")
        key.alignment = CENTER
        apply_data_style(legend.cell(row=row, column=2, value=f"Level: {value}"), border_color=BORDER)

    register = workbook.create_sheet("Roles Register")
    set_column_widths(register, (24, 40, 20, 20))
    register.row_dimensions[1].height = 20
    for col, heading in enumerate(("Role Name", "Description", "Azure Built-in Role", "Custom Role?"), start=1):
        _header(register.cell(row=1, column=col, value=heading), header)
    for index, role in enumerate(roles):
        row = 2 + index
        stripe = "#F9FAFB" if index % 2 == 0 else None
        register.row_dimensions[row].height = 18
        for col, value in enumerate((role, "", "", "No"), start=1):
            cell = write_text(register, row, col, value)
            apply_data_style(cell, stripe, border_color=BORDER)
            if col >= 3:
                cell.alignment = Alignment(horizontal="center")
        register.cell(row=row, column=1).font = Font(name="Calibri", bold=True, size=10)
    add_list_validation(register, ("Yes", "No"), f"D2:D{1 + len(roles)}", allow_blank=False)

    return workbook


RBAC_TEMPLATE = TemplateDefinition(
    id="rbac",
    name="RBAC Matrix",
    description=(
        "Role-Based Access Control matrix mapping roles to resources/permissions. "
        "Great for Azure IAM and application security design."
    ),
    category="consulting",
    icon="🔐",
    tags=("rbac", "security", "azure", "iam", "permissions", "consulting"),
    fields=(
        ConfigField("projectName", "Project / System Name", FieldType.TEXT, "Azure Platform RBAC", group="Project"),
        ConfigField("companyName", "Organisation", FieldType.TEXT, "Acme Corp", group="Project"),
        ConfigField("headerColor", "Header Colour", FieldType.COLOR, "#0078D4", group="Branding"),
        ConfigField("accentColor", "Accent Colour", FieldType.COLOR, "#50E6FF", group="Branding"),
        ConfigField(
            "roles",
            "Roles",
            FieldType.TAGS,
            [
                "Owner", "Contributor", "Reader", "Security Admin",
                "Network Contributor", "Billing Reader", "DevOps Engineer", "Helpdesk",
            ],
            min=1,
            group="RBAC",
        ),
        ConfigField(
            "resourceGroups",
            "Resource Groups / Scopes",
            FieldType.TAGS,
            ["Production", "Development", "Staging", "Shared Services", "Network Hub", "Security"],
            min=1,
            group="RBAC",
        ),
        ConfigField(
            "permissionValues",
            "Permission Key",
            FieldType.SELECT,
            "CRUD",
            options=options(
                ("CRUD (C/R/U/D)", "CRUD"),
                ("Allow/Deny (✓/✗)", "AllowDeny"),
                ("Access Levels (Full/Read/None)", "Levels"),
                ("Azure Built-in Roles (Owner/Contributor/Reader)", "Azure"),
            ),
            group="Settings",
        ),
        ConfigField("includeDescription", "Include Role Descriptions", FieldType.TOGGLE, True, group="Settings"),
        ConfigField("includeJustification", "Include Justification Column", FieldType.TOGGLE, True, group="Settings"),
        ConfigField(
            "azureEnvironment",
            "Azure Environment",
            FieldType.SELECT,
            "All",
            options=options(
                ("All Environments", "All"),
                ("Production Only", "Production"),
                ("Non-Production", "NonProd"),
            ),
            group="Settings",
        ),
    ),
    builder=generate_rbac_workbook,
)
