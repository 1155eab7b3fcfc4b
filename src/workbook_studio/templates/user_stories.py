"""User Stories & Personas: story backlog, epic register and persona profile grid."""

from __future__ import annotations

from openpyxl import Workbook
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
    add_range_validation,
    apply_data_style,
    apply_header_style,
    argb,
    generated_stamp,
    merge_title,
    set_column_widths,
    sheet_range,
    write_text,
)

STORY_POINT_SCALES: dict[str, tuple[str, ...]] = {
    "Fibonacci": ("1", "2", "3", "5", "8", "13", "21"),
    "TShirt": ("XS", "S", "M", "L", "XL"),
    "Linear": tuple(str(n) for n in range(1, 11)),
}
STATUS_VALUES = ("Backlog", "Refined", "Ready", "In Progress", "In Review", "Done")
MOSCOW_VALUES = ("Must Have", "Should Have", "Could Have", "Won't Have")
PERSONA_ATTRIBUTES = (
    "Name",
    "Role / Job Title",
    "Age Range",
    "Technical Proficiency",
    "Key Goals",
    "Pain Points",
    "Needs from System",
    "Quote / Insight",
    "Devices Used",
    "Notes",
)
HEADER_ROW = 4
EPIC_SHEET = "Epics"
PERSONA_SHEET = "Persona Profiles"
PERSONA_LIST_COL = 8
STRIPE_FILL = "#FAF5FF"
WRAP_LEFT = Alignment(horizontal="left", vertical="center", wrap_text=True)


def story_id(index: int) -> str:
    return f"US-{index + 1:03d}"


def backlog_column_count(include_moscow: bool) -> int:
    return 10 if include_moscow else 9


def generate_user_stories_workbook(config: TemplateConfig) -> Workbook:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    story_count = int(config["storyCount"]) or 20
    epics = list(config["epicNames"])
    personas = list(config["personas"])
    include_moscow = bool(config["includeMoSCoW"])
    scale = str(config["storyPointScale"])
    total_cols = backlog_column_count(include_moscow)

    workbook = Workbook()
    workbook.remove(workbook.active)
    workbook.properties.creator = str(config["companyName"])

    sheet = workbook.create_sheet("Story Backlog")
    sheet.freeze_panes = f"A{HEADER_ROW + 1}"
    widths = [10, 18, 18, 36, 36, 36, 10, 14]
    if include_moscow:
        widths.append(14)
    widths.append(24)
    set_column_widths(sheet, widths)

    title = merge_title(sheet, 1, total_cols, f"{config['projectName']}  —  User Story Backlog", header, height=30)
    title.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=15)
    subtitle = merge_title(
        sheet,
        2,
        total_cols,
        f"Organisation: {config['companyName']}   |   Story Points: {scale}   |   Generated: {generated_stamp()}",
        accent,
        height=16,
    )
    subtitle.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=9)

    headings = [
        "Story ID", "Epic", "Persona", "User Story (As a [persona], I want to [action])",
        "So That... (Benefit)", "Acceptance Criteria", "Points", "Status",
    ]
    if include_moscow:
        headings.append("MoSCoW")
    headings.append("Notes")
    sheet.row_dimensions[HEADER_ROW].height = 40
    for col, heading in enumerate(headings, start=1):
        cell = sheet.cell(row=HEADER_ROW, column=col, value=heading)
        apply_header_style(cell, header, size=10)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    first_row = HEADER_ROW + 1
    last_row = HEADER_ROW + story_count
    for index in range(story_count):
        row = first_row + index
        stripe = STRIPE_FILL if index % 2 == 0 else None
        sheet.row_dimensions[row].height = 36
        for col in range(1, total_cols + 1):
            cell = sheet.cell(row=row, column=col, value="")
            apply_data_style(cell, stripe)
            cell.alignment = WRAP_LEFT if col in (4, 5, 6, total_cols) else CENTER
        id_cell = sheet.cell(row=row, column=1, value=story_id(index))
        id_cell.font = Font(name="Calibri", size=9, bold=True, color=argb(header))
        sheet.cell(row=row, column=8, value="Backlog")

    def column_range(col: int) -> str:
        letter = get_column_letter(col)
        return f"{letter}{first_row}:{letter}{last_row}"

    # Epic and persona dropdowns read the register cells.
    add_range_validation(sheet, sheet_range(EPIC_SHEET, 2, 3, 2, 2 + len(epics)), column_range(2))
    if config["includePersonaSheet"]:
        persona_source = sheet_range(PERSONA_SHEET, 2, 2, len(personas) + 1, 2)
    else:
        persona_source = sheet_range(EPIC_SHEET, PERSONA_LIST_COL, 3, PERSONA_LIST_COL, 2 + len(personas))
    add_range_validation(sheet, persona_source, column_range(3))
    add_list_validation(sheet, STORY_POINT_SCALES[scale], column_range(7))
    add_list_validation(sheet, STATUS_VALUES, column_range(8), allow_blank=False)
    if include_moscow:
        add_list_validation(sheet, MOSCOW_VALUES, column_range(9))

    epic_sheet = workbook.create_sheet(EPIC_SHEET)
    set_column_widths(epic_sheet, (8, 24, 40, 16, 20, 16))
    merge_title(epic_sheet, 1, 6, "Epic Register", header, size=10, height=24)
    epic_sheet.row_dimensions[2].height = 20
    for col, heading in enumerate(("#", "Epic Name", "Description", "Priority", "Owner", "Status"), start=1):
        cell = epic_sheet.cell(row=2, column=col, value=heading)
        apply_header_style(cell, accent, size=10)
        cell.alignment = CENTER
    for index, epic in enumerate(epics):
        row = 3 + index
        stripe = STRIPE_FILL if index % 2 == 0 else None
        epic_sheet.row_dimensions[row].height = 20
        for col, value in enumerate((index + 1, epic, "", "", "", "Not Started"), start=1):
            apply_data_style(write_text(epic_sheet, row, col, value), stripe)
        epic_sheet.cell(row=row, column=1).alignment = Alignment(horizontal="center")
        epic_sheet.cell(row=row, column=2).font = Font(name="Calibri", bold=True, size=10)

    if not config["includePersonaSheet"]:
        epic_sheet.column_dimensions[get_column_letter(PERSONA_LIST_COL)].width = 24
        heading = epic_sheet.cell(row=2, column=PERSONA_LIST_COL, value="Personas")
        apply_header_style(heading, accent, size=10)
        heading.alignment = CENTER
        for index, persona in enumerate(personas):
            apply_data_style(write_text(epic_sheet, 3 + index, PERSONA_LIST_COL, persona))

    if config["includePersonaSheet"]:
        persona_sheet = workbook.create_sheet(PERSONA_SHEET)
        last_col = len(personas) + 1
        set_column_widths(persona_sheet, [24] + [40] * len(personas))
        merge_title(persona_sheet, 1, last_col, "Persona Profiles", header, size=10, height=24)
        persona_sheet.row_dimensions[2].height = 20
        for col, heading in enumerate(["Attribute", *personas], start=1):
            cell = write_text(persona_sheet, 2, col, heading)
            apply_header_style(cell, accent, size=10)
            cell.alignment = CENTER
        for index, attribute in enumerate(PERSONA_ATTRIBUTES):
            row = 3 + index
            persona_sheet.row_dimensions[row].height = 36
            label = persona_sheet.cell(row=row, column=1, value=attribute)
            apply_data_style(label, STRIPE_FILL)
            label.font = Font(name="Calibri", bold=True, size=10)
            for col in range(2, last_col + 1):
                cell = persona_sheet.cell(row=row, column=col, value="")
                apply_data_style(cell, "#FDFBFF" if index % 2 == 0 else None)
                cell.alignment = WRAP_LEFT

    return workbook


USER_STORIES_TEMPLATE = TemplateDefinition(
    id="user-stories",
    name="User Stories & Personas",
    description="Agile user story backlog with persona cards, acceptance criteria, story points, and priority tracking.",
    category="consulting",
    icon="👤",
    tags=("agile", "user stories", "personas", "backlog", "consulting"),
    fields=(
        ConfigField("projectName", "Project Name", FieldType.TEXT, "Digital Transformation", group="Project"),
        ConfigField("companyName", "Organisation", FieldType.TEXT, "Acme Corp", group="Project"),
        ConfigField("headerColor", "Header Colour", FieldType.COLOR, "#6C3483", group="Branding"),
        ConfigField("accentColor", "Accent Colour", FieldType.COLOR, "#A569BD", group="Branding"),
        ConfigField(
            "epicNames",
            "Epics",
            FieldType.TAGS,
            ["User Management", "Reporting & Analytics", "Notifications", "Integrations", "Administration"],
            min=1,
            group="Backlog",
        ),
        ConfigField(
            "personas",
            "Personas",
            FieldType.TAGS,
            ["End User", "Administrator", "Manager", "External Partner", "Developer"],
            min=1,
            group="Personas",
        ),
        ConfigField("storyCount", "Number of Story Rows", FieldType.NUMBER, 20, min=5, max=100, group="Backlog"),
        ConfigField(
            "storyPointScale",
            "Story Point Scale",
            FieldType.SELECT,
            "Fibonacci",
            options=options(
                ("Fibonacci (1,2,3,5,8,13,21)", "Fibonacci"),
                ("T-Shirt (XS,S,M,L,XL)", "TShirt"),
                ("Linear (1-10)", "Linear"),
            ),
            group="Backlog",
        ),
        ConfigField("includePersonaSheet", "Include Persona Profiles Sheet", FieldType.TOGGLE, True,
                    group="Personas"),
        ConfigField("includeMoSCoW", "Include MoSCoW Prioritisation", FieldType.TOGGLE, True, group="Backlog"),
    ),
    builder=generate_user_stories_workbook,
)
