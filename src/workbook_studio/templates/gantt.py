"""Project Timeline / Gantt: phase-banded weekly grid plus a task register."""

from __future__ import annotations

import math

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from workbook_studio.config import EXCEL_DATE_FORMAT
from workbook_studio.templates.schema import ConfigField, FieldType, TemplateConfig, TemplateDefinition
from workbook_studio.templates.styles import (
    CENTER,
    LEFT,
    add_list_validation,
    apply_data_style,
    apply_header_style,
    generated_stamp,
    merge_title,
    set_column_widths,
    solid_fill,
    write_text,
)

WEEKS_PER_MONTH = 4
PHASE_FILL = "#34495E"
META_FILL = "#F5F5F5"
GRID_BORDER = "FFE8E8E8"
STATUS_VALUES = ("Not Started", "In Progress", "Complete", "On Hold", "Blocked")
RACI_VALUES = ("R", "A", "C", "I")
REGISTER_HEADERS = (
    "#", "Task / Milestone", "Phase", "Owner", "Start Date", "End Date", "Duration (d)", "Status", "Notes",
)


def fixed_column_count(show_status: bool, show_raci: bool) -> int:
    return 4 + int(show_status) + int(show_raci)


def tasks_per_phase(task_rows: int, phase_count: int) -> list[int]:
    """Split ``task_rows`` over phases; the last phase absorbs the remainder.

    Every phase is listed, even those left with no tasks.
    """
    per_phase = math.ceil(task_rows / phase_count)
    counts = []
    remaining = task_rows
    for index in range(phase_count):
        count = remaining if index == phase_count - 1 else min(per_phase, remaining)
        counts.append(max(0, count))
        remaining -= counts[-1]
    return counts


def generate_gantt_workbook(config: TemplateConfig) -> Workbook:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    weeks = min(int(config["weeks"]) or 12, 52)
    task_rows = int(config["taskRows"]) or 15
    phases = list(config["phases"])
    show_status = bool(config["showStatus"])
    show_raci = bool(config["showRaci"])
    fixed_cols = fixed_column_count(show_status, show_raci)
    last_col = fixed_cols + weeks

    workbook = Workbook()
    workbook.remove(workbook.active)
    workbook.properties.creator = str(config["companyName"])

    sheet = workbook.create_sheet("Gantt Chart")
    sheet.freeze_panes = f"{get_column_letter(5)}6"
    set_column_widths(sheet, (6, 32, 14, 16))
    if show_status:
        sheet.column_dimensions["E"].width = 14
    if show_raci:
        sheet.column_dimensions[get_column_letter(6 if show_status else 5)].width = 12
    for week in range(1, weeks + 1):
        sheet.column_dimensions[get_column_letter(fixed_cols + week)].width = 5

    r = 1
    title = merge_title(sheet, r, last_col, f"{config['projectName']}  —  Project Timeline", header, height=32)
    title.font = Font(name="Calibri", bold=True, color="FFFFFFFF", size=16)
    r += 1

    split = fixed_cols // 2
    meta_font = Font(name="Calibri", size=9, color="FF444444")
    sheet.merge_cells(start_row=r, start_column=1, end_row=r, end_column=split)
    sheet.merge_cells(start_row=r, start_column=split + 1, end_row=r, end_column=fixed_cols)
    for col, text in (
        (1, f"Client: {config['companyName']}"),
        (split + 1, f"PM: {config['projectManager']}  |  Generated: {generated_stamp()}"),
    ):
        cell = sheet.cell(row=r, column=col, value=text)
        cell.font = meta_font
        cell.fill = solid_fill(META_FILL)
    sheet.row_dimensions[r].height = 16
    r += 1

    headings = ["#", "Task / Milestone", "Owner", "Phase"]
    if show_status:
        headings.append("Status")
    if show_raci:
        headings.append("RACI")
    headings.extend(f"W{week}" for week in range(1, weeks + 1))
    sheet.row_dimensions[r].height = 16
    for col, heading in enumerate(headings, start=1):
        cell = sheet.cell(row=r, column=col, value=heading)
        apply_header_style(cell, header, size=8 if col > fixed_cols else 11)
        cell.alignment = CENTER
    r += 1

    sheet.row_dimensions[r].height = 14
    col = fixed_cols + 1
    month = 1
    while col <= last_col:
        span = min(WEEKS_PER_MONTH, last_col - col + 1)
        if span > 1:
            sheet.merge_cells(start_row=r, start_column=col, end_row=r, end_column=col + span - 1)
        cell = sheet.cell(row=r, column=col, value=f"Month {month}")
        apply_header_style(cell, accent, size=8)
        cell.alignment = CENTER
        col += span
        month += 1
    r += 1

    status_col = 5 if show_status else None
    raci_col = (6 if show_status else 5) if show_raci else None
    task_number = 1
    first_task_row = r
    for phase, count in zip(phases, tasks_per_phase(task_rows, len(phases))):
        band = merge_title(sheet, r, last_col, f"▶  {phase.upper()}", PHASE_FILL, size=10, height=18)
        band.alignment = LEFT
        r += 1

        for _ in range(count):
            stripe = "#F9FAFB" if task_number % 2 == 0 else None
            sheet.row_dimensions[r].height = 16
            values = [task_number, f"Task {task_number}", "", phase]
            for col, value in enumerate(values, start=1):
                cell = write_text(sheet, r, col, value)
                apply_data_style(cell, stripe, size=9, border_color=GRID_BORDER)
                if col != 2:
                    cell.alignment = CENTER
            sheet.cell(row=r, column=1).font = Font(name="Calibri", size=9, color="FF888888")
            sheet.cell(row=r, column=4).font = Font(name="Calibri", size=8, italic=True)
            if status_col:
                cell = sheet.cell(row=r, column=status_col, value="Not Started")
                apply_data_style(cell, stripe, size=8, border_color=GRID_BORDER)
                cell.alignment = CENTER
            if raci_col:
                cell = sheet.cell(row=r, column=raci_col, value="")
                apply_data_style(cell, stripe, size=9, border_color=GRID_BORDER)
                cell.alignment = CENTER
            for week in range(1, weeks + 1):
                cell = sheet.cell(row=r, column=fixed_cols + week, value="")
                apply_data_style(cell, "#FAFAFA" if task_number % 2 == 0 else "#FFFFFF", border_color=GRID_BORDER)
            task_number += 1
            r += 1
    last_task_row = r - 1

    if last_task_row >= first_task_row:
        if status_col:
            letter = get_column_letter(status_col)
            add_list_validation(sheet, STATUS_VALUES, f"{letter}{first_task_row}:{letter}{last_task_row}")
        if raci_col:
            letter = get_column_letter(raci_col)
            add_list_validation(sheet, RACI_VALUES, f"{letter}{first_task_row}:{letter}{last_task_row}")

    r += 1
    merge_title(sheet, r, 3, "LEGEND", header, height=16)
    r += 1
    for label, color in (
        ("Task In Progress", str(config["taskColor"])),
        ("Task Completed", str(config["completedColor"])),
        ("Milestone", accent),
    ):
        sheet.row_dimensions[r].height = 14
        swatch = sheet.cell(row=r, column=1, value=" ")
        swatch.fill = solid_fill(color)
        sheet.cell(row=r, column=2, value=label).font = Font(name="Calibri", size=9)
        r += 1

    register = workbook.create_sheet("Task Register")
    set_column_widths(register, (6, 32, 18, 16, 14, 14, 14, 12, 40))
    register.row_dimensions[1].height = 20
    for col, heading in enumerate(REGISTER_HEADERS, start=1):
        cell = register.cell(row=1, column=col, value=heading)
        apply_header_style(cell, header)
        cell.alignment = CENTER

    for index in range(task_rows):
        row = index + 2
        stripe = "#F9FAFB" if index % 2 == 0 else None
        register.row_dimensions[row].height = 16
        number = register.cell(row=row, column=1, value=index + 1)
        number.alignment = CENTER
        apply_data_style(number, stripe, size=9, border_color=GRID_BORDER)
        for col in range(2, len(REGISTER_HEADERS) + 1):
            apply_data_style(register.cell(row=row, column=col, value=""), stripe, size=9, border_color=GRID_BORDER)
        register.cell(row=row, column=5).number_format = EXCEL_DATE_FORMAT
        register.cell(row=row, column=6).number_format = EXCEL_DATE_FORMAT
        duration = register.cell(row=row, column=7, value=f'=IF(AND(E{row}<>"",F{row}<>""),F{row}-E{row},"")')
        duration.number_format = "0"

    add_list_validation(register, STATUS_VALUES, f"H2:H{task_rows + 1}")
    return workbook


GANTT_TEMPLATE = TemplateDefinition(
    id="gantt",
    name="Project Timeline / Gantt",
    description="Visual project timeline with phases, tasks, milestones, and a weekly/monthly grid.",
    category="project",
    icon="📅",
    tags=("project", "gantt", "timeline", "planning"),
    fields=(
        ConfigField("projectName", "Project Name", FieldType.TEXT, "Azure Migration Project", group="Project"),
        ConfigField("companyName", "Company / Client", FieldType.TEXT, "Acme Corp", group="Project"),
        ConfigField("projectManager", "Project Manager", FieldType.TEXT, "Jane Smith", group="Project"),
        ConfigField("headerColor", "Header Colour", FieldType.COLOR, "#1E3A5F", group="Branding"),
        ConfigField("accentColor", "Milestone Colour", FieldType.COLOR, "#E74C3C", group="Branding"),
        ConfigField("taskColor", "Task Bar Colour", FieldType.COLOR, "#2E86AB", group="Branding"),
        ConfigField("completedColor", "Completed Bar Colour", FieldType.COLOR, "#27AE60", group="Branding"),
        ConfigField("weeks", "Project Duration (weeks)", FieldType.NUMBER, 12, min=4, max=52, group="Settings"),
        ConfigField("taskRows", "Number of Task Rows", FieldType.NUMBER, 15, min=5, max=50, group="Settings"),
        ConfigField(
            "phases",
            "Project Phases",
            FieldType.TAGS,
            ["Initiation", "Planning", "Execution", "Monitoring", "Closure"],
            min=1,
            group="Settings",
        ),
        ConfigField("showRaci", "Include RACI Column", FieldType.TOGGLE, True, group="Settings"),
        ConfigField("showStatus", "Include Status Column", FieldType.TOGGLE, True, group="Settings"),
    ),
    builder=generate_gantt_workbook,
)
