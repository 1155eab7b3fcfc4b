from __future__ import annotations

import pytest

from workbook_studio.exceptions import ConfigValidationError, UnknownTemplateError
from workbook_studio.templates import (
    TEMPLATE_MAP,
    TEMPLATES,
    default_config,
    generate_workbook,
    get_template,
    validate_config,
)
from workbook_studio.templates.schema import FieldType


def test_registry_lists_six_templates_in_order() -> None:
    assert [template.id for template in TEMPLATES] == [
        "budget",
        "invoice",
        "gantt",
        "rbac",
        "azure-calculator",
        "user-stories",
    ]
    assert set(TEMPLATE_MAP) == {template.id for template in TEMPLATES}
    assert [template.id for template in TEMPLATES if template.supports_ai] == ["azure-calculator"]


def test_unknown_template() -> None:
    with pytest.raises(UnknownTemplateError, match="Unknown template: payroll"):
        get_template("payroll")


def test_field_keys_are_unique_and_defaults_validate() -> None:
    for template in TEMPLATES:
        keys = [field.key for field in template.fields]
        assert len(keys) == len(set(keys)), template.id
        assert validate_config(template, default_config(template)) == default_config(template)


def test_select_defaults_are_listed_options() -> None:
    for template in TEMPLATES:
        for field in template.fields:
            if field.type is FieldType.SELECT:
                assert field.default in [option.value for option in field.options], (template.id, field.key)


def test_missing_and_null_keys_take_defaults() -> None:
    budget = get_template("budget")
    config = validate_config(budget, {"companyName": "Globex", "months": None})
    assert config["companyName"] == "Globex"
    assert config["months"] == 12
    assert config["currency"] == "AUD"
    assert validate_config(budget, None) == default_config(budget)


def test_defaults_are_copied_not_shared() -> None:
    budget = get_template("budget")
    config = validate_config(budget, {})
    config["categories"].append("Mutated")
    assert "Mutated" not in budget.get_field("categories").default


def test_unknown_keys_are_dropped() -> None:
    config = validate_config(get_template("budget"), {"favouriteColour": "teal"})
    assert "favouriteColour" not in config


def test_all_errors_are_reported_together() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        validate_config(get_template("budget"), {"headerColor": "red", "months": 13, "currency": "JPY"})
    errors = excinfo.value.errors
    assert len(errors) == 3
    assert any("'headerColor' must be a #RRGGBB colour" in error for error in errors)
    assert any("'months' must be <= 12" in error for error in errors)
    assert any("'currency' must be one of" in error for error in errors)
    assert excinfo.value.template_id == "budget"


def test_number_fields_accept_numeric_strings() -> None:
    config = validate_config(get_template("budget"), {"months": "6"})
    assert config["months"] == 6
    invoice = validate_config(get_template("invoice"), {"taxRate": "7.5"})
    assert invoice["taxRate"] == pytest.approx(7.5)


@pytest.mark.parametrize("value", [True, "six", [6]])
def test_number_fields_reject_non_numbers(value: object) -> None:
    with pytest.raises(ConfigValidationError, match="'months' must be a number"):
        validate_config(get_template("budget"), {"months": value})


@pytest.mark.parametrize(
    ("template_id", "key", "value"),
    [
        ("budget", "months", "nan"),
        ("budget", "months", float("inf")),
        ("invoice", "taxRate", float("nan")),
        ("invoice", "taxRate", "-inf"),
    ],
)
def test_number_fields_reject_non_finite_values(template_id: str, key: str, value: object) -> None:
    with pytest.raises(ConfigValidationError, match=f"'{key}' must be a finite number"):
        validate_config(get_template(template_id), {key: value})


def test_non_finite_tax_rate_never_reaches_builder() -> None:
    with pytest.raises(ConfigValidationError):
        generate_workbook("invoice", {"taxRate": float("nan")})


def test_number_bounds() -> None:
    with pytest.raises(ConfigValidationError, match="'lineItems' must be >= 3"):
        validate_config(get_template("invoice"), {"lineItems": 2})


def test_toggle_accepts_booleans_and_boolean_strings() -> None:
    gantt = get_template("gantt")
    assert validate_config(gantt, {"showRaci": False})["showRaci"] is False
    assert validate_config(gantt, {"showRaci": "false"})["showRaci"] is False
    assert validate_config(gantt, {"showRaci": "TRUE"})["showRaci"] is True
    with pytest.raises(ConfigValidationError, match="'showRaci' must be a boolean"):
        validate_config(gantt, {"showRaci": 1})


def test_tags_are_trimmed_and_bounded() -> None:
    budget = get_template("budget")
    config = validate_config(budget, {"categories": [" Rent ", "", "Travel"]})
    assert config["categories"] == ["Rent", "Travel"]
    with pytest.raises(ConfigValidationError, match="'categories' needs at least 1 item"):
        validate_config(budget, {"categories": ["  "]})
    with pytest.raises(ConfigValidationError, match="'categories' must be a list of strings"):
        validate_config(budget, {"categories": "Rent, Travel"})


def test_text_fields_stringify_numbers() -> None:
    config = validate_config(get_template("budget"), {"companyName": 2026})
    assert config["companyName"] == "2026"


def test_colour_must_be_six_digit_hex() -> None:
    budget = get_template("budget")
    assert validate_config(budget, {"headerColor": "#abcdef"})["headerColor"] == "#abcdef"
    for bad in ("#abc", "123456", "#GGGGGG", 123456):
        with pytest.raises(ConfigValidationError):
            validate_config(budget, {"headerColor": bad})


def test_non_mapping_config_is_rejected() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        validate_config(get_template("budget"), ["not", "a", "dict"])  # type: ignore[arg-type]
    assert excinfo.value.errors == ["config must be an object"]


def test_get_field_unknown_key() -> None:
    with pytest.raises(KeyError):
        get_template("rbac").get_field("nope")
