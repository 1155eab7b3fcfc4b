"""Lightweight table previews for the configuration UI.

Each generator returns a few rows shaped like the workbook its builder
produces, using the same category ordering and currency symbols. Nothing is
computed; monetary cells are illustrative.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from workbook_studio.api_models import PreviewCell, PreviewCellStyle
from workbook_studio.config import currency_symbol
from workbook_studio.templates import get_template, validate_config
from workbook_studio.templates.azure_calculator import CATEGORY_FILL
from workbook_studio.templates.budget import MONTH_NAMES
from workbook_studio.templates.gantt import PHASE_FILL
from workbook_studio.templates.rbac import PERMISSION_COLORS, permission_values
from workbook_studio.templates.schema import TemplateConfig
from workbook_studio.templates.user_stories import STORY_POINT_SCALES, story_id

PreviewRows = list[list[PreviewCell]]

WHITE = "#fff"
NAVY = "#003087"


def _cell(
    value: object,
    *,
    header: bool = False,
    span: Optional[int] = None,
    **style: Any,
) -> PreviewCell:
    return PreviewCell(
        value=str(value),
        is_header=header or None,
        col_span=span,
        style=PreviewCellStyle(**style),
    )


def _banner(value: object, span: int, background: str, color: str = WHITE) -> list[PreviewCell]:
    return [_cell(value, span=span, background=background, color=color, bold=True, align="center")]


def _headers(labels: list[str], background: str, first_align: str = "left") -> list[PreviewCell]:
    return [
        _cell(label, header=True, background=background, color=WHITE, bold=True,
              align=first_align if index == 0 else "center")
        for index, label in enumerate(labels)
    ]


def budget_preview(config: TemplateConfig) -> PreviewRows:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    symbol = currency_symbol(config["currency"])
    months = list(MONTH_NAMES[: min(int(config["months"]), 2)])
    width = len(months) + 2
    rows: PreviewRows = [
        _banner(config["companyName"] or "Company", width, header),
        _banner(config["reportTitle"] or "Budget Tracker", width, accent),
        _headers(["Category", *months, "Total"], header),
    ]
    for category in list(config["categories"])[:4]:
        rows.append(
            [_cell(category, align="left")]
            + [_cell(f"{symbol} -", align="right") for _ in range(width - 1)]
        )
    rows.append(
        [_cell("TOTAL", background=accent, color=WHITE, bold=True)]
        + [_cell(f"{symbol} 0", background="#e8f4f8", bold=True, align="right") for _ in range(width - 1)]
    )
    return rows


def invoice_preview(config: TemplateConfig) -> PreviewRows:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    symbol = currency_symbol(config["currency"])
    return [
        _banner(config["companyName"], 4, header),
        _banner(config["documentType"], 4, accent),
        _headers(["Description", "Qty", "Rate", "Amount"], header),
        [_cell("Consulting Services"), _cell("8", align="center"),
         _cell(f"{symbol}150.00", align="right"), _cell(f"{symbol}1,200.00", align="right")],
        [_cell("Project Management"), _cell("4", align="center"),
         _cell(f"{symbol}200.00", align="right"), _cell(f"{symbol}800.00", align="right")],
        [_cell(f"{config['taxLabel']} ({float(config['taxRate']):g}%)"), _cell(""), _cell(""),
         _cell(f"{symbol}200.00", align="right")],
        [_cell("TOTAL DUE", background=accent, color=WHITE, bold=True), _cell("", background=accent),
         _cell("", background=accent),
         _cell(f"{symbol}2,200.00", background=accent, color=WHITE, bold=True, align="right")],
    ]


def gantt_preview(config: TemplateConfig) -> PreviewRows:
    header = str(config["headerColor"])
    task = str(config["taskColor"])
    bar = {"background": task, "color": task, "align": "center"}
    rows: PreviewRows = [
        _banner(config["projectName"], 5, header),
        _headers(["Task / Milestone", "Owner", "Wk 1", "Wk 2", "Status"], header),
    ]
    for index, phase in enumerate(list(config["phases"])[:2]):
        rows.append([_cell(f"▶ {phase}", span=5, background=PHASE_FILL, color=WHITE, bold=True)])
        first_week = index == 0
        rows.append([
            _cell(f"  Task {index * 2 + 1}"), _cell(config["projectManager"], align="center"),
            _cell("█", **bar) if first_week else _cell(""), _cell("█", **bar),
            _cell("In Progress" if first_week else "Not Started", align="center"),
        ])
    return rows


def rbac_preview(config: TemplateConfig) -> PreviewRows:
    header = str(config["headerColor"])
    roles = list(config["roles"])[:4]
    values = permission_values(str(config["permissionValues"]))
    rows: PreviewRows = [
        _banner(config["projectName"], len(roles) + 1, header),
        _headers(["Resource / Scope", *roles], header),
    ]
    for scope_index, scope in enumerate(list(config["resourceGroups"])[:2]):
        row = [_cell(scope, background="#F0F7FF" if scope_index == 0 else None, bold=True)]
        for role_index in range(len(roles)):
            value = values[(role_index + scope_index) % len(values)]
            row.append(_cell(value, color=PERMISSION_COLORS.get(value), bold=True, align="center"))
        rows.append(row)
    return rows


def azure_calculator_preview(config: TemplateConfig) -> PreviewRows:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    symbol = currency_symbol(config["currency"])
    rows: PreviewRows = [
        _banner(config["projectName"], 5, header),
        _banner("Azure Cost Estimate", 5, accent, color=NAVY),
        _headers(["Resource", "SKU", "Qty", "Monthly", "Annual"], header),
    ]
    for category in list(config["resourceCategories"])[:3]:
        rows.append([_cell(f"▶ {category}", span=5, background=CATEGORY_FILL, color=WHITE, bold=True)])
        rows.append([
            _cell(f"{category} Resource 1"), _cell("—", align="center"), _cell("1", align="center"),
            _cell(f"{symbol}0", align="right"), _cell(f"{symbol}0", align="right"),
        ])
    rows.append([
        _cell("TOTAL", span=4, background=accent, color=NAVY, bold=True),
        _cell(f"{symbol}0", background=accent, color=NAVY, bold=True, align="right"),
    ])
    return rows


def user_stories_preview(config: TemplateConfig) -> PreviewRows:
    header = str(config["headerColor"])
    accent = str(config["accentColor"])
    points = STORY_POINT_SCALES[str(config["storyPointScale"])]
    personas = list(config["personas"])
    last = "Priority" if config["includeMoSCoW"] else "Status"
    rows: PreviewRows = [
        _banner(config["projectName"], 5, header),
        _banner("User Story Backlog", 5, accent),
        _headers(["ID", "As a...", "I want to...", "Points", last], header, first_align="center"),
    ]
    samples = ("log in securely", "manage user accounts", "view dashboard reports")
    for index, action in enumerate(samples[: len(personas)]):
        status = "Must Have" if config["includeMoSCoW"] else "Backlog"
        rows.append([
            _cell(story_id(index), align="center"), _cell(personas[index]), _cell(action),
            _cell(points[min(index + 1, len(points) - 1)], align="center"),
            _cell(status, align="center"),
        ])
    return rows


PREVIEW_GENERATORS: dict[str, Callable[[TemplateConfig], PreviewRows]] = {
    "budget": budget_preview,
    "invoice": invoice_preview,
    "gantt": gantt_preview,
    "rbac": rbac_preview,
    "azure-calculator": azure_calculator_preview,
    "user-stories": user_stories_preview,
}


def generate_preview(template_id: str, config: Optional[Mapping[str, Any]] = None) -> PreviewRows:
    """Preview rows for ``template_id`` using the validated, defaulted config."""
    template = get_template(template_id)
    return PREVIEW_GENERATORS[template.id](validate_config(template, config))
