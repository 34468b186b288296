"""Unit tests for required-field schemas and validation."""

from services.schema import (
    CLASSIC_SCHEMA,
    EXTENDED_SCHEMA,
    SCHEMAS,
    TARGET_VOCABULARY,
    Field,
    missing_field_error,
    validate,
)

COMPLETE = {
    "title": "Hello",
    "date": "<2020-05-01 Fri>",
    "categories": "tech",
    "layout": "post",
}


def test_presets_registered_by_name():
    assert SCHEMAS["classic"] is CLASSIC_SCHEMA
    assert SCHEMAS["extended"] is EXTENDED_SCHEMA


def test_classic_required_fields():
    assert CLASSIC_SCHEMA.required == ["title", "date", "categories", "layout"]
    assert "tags" in CLASSIC_SCHEMA.fields


def test_extended_required_fields():
    assert EXTENDED_SCHEMA.required == ["title", "categories", "description", "layout"]
    assert "date" in EXTENDED_SCHEMA.fields
    assert "author" in EXTENDED_SCHEMA.fields


def test_validate_ok():
    result = validate(COMPLETE, CLASSIC_SCHEMA)
    assert result.valid
    assert result.headers == COMPLETE
    assert result.message == ""


def test_validate_result_headers_are_a_copy():
    headers = dict(COMPLETE)
    result = validate(headers, CLASSIC_SCHEMA)
    result.headers["title"] = "changed"
    assert headers["title"] == "Hello"


def test_validate_errors_follow_schema_order():
    headers = {"date": "<2020-05-01>", "categories": "tech", "tags": "a"}
    result = validate(headers, CLASSIC_SCHEMA)
    assert not result.valid
    assert result.headers is None
    assert result.message == (
        "- The title is required, please add '#+TITLE' at the top of your document.\n"
        "- The layout is required, please add '#+LAYOUT' at the top of your document."
    )


def test_validate_empty_headers_lists_every_required_field():
    result = validate({}, CLASSIC_SCHEMA)
    assert result.errors == [missing_field_error(n) for n in CLASSIC_SCHEMA.required]


def test_validate_present_but_empty_passes_by_default():
    headers = {**COMPLETE, "categories": ""}
    assert validate(headers, CLASSIC_SCHEMA).valid


def test_validate_empty_counts_as_absent_when_configured():
    headers = {**COMPLETE, "categories": "  "}
    result = validate(headers, CLASSIC_SCHEMA, empty_is_present=False)
    assert not result.valid
    assert "'#+CATEGORIES'" in result.message


def test_validate_extended_requires_description():
    headers = {"title": "T", "categories": "c", "layout": "post"}
    result = validate(headers, EXTENDED_SCHEMA)
    assert result.errors == [missing_field_error("description")]


def test_with_overrides_relaxes_field():
    relaxed = EXTENDED_SCHEMA.with_overrides({"description": False, "unknown": True})
    assert "description" not in relaxed.required
    assert relaxed.fields == EXTENDED_SCHEMA.fields
    # the preset itself is untouched
    assert "description" in EXTENDED_SCHEMA.required


def test_with_overrides_empty_returns_same_schema():
    assert CLASSIC_SCHEMA.with_overrides({}) is CLASSIC_SCHEMA


def test_target_vocabulary_excludes_source_only_fields():
    assert Field.EXCERPT.value in TARGET_VOCABULARY
    assert Field.OPTIONS.value not in TARGET_VOCABULARY
    assert Field.DESCRIPTION.value not in TARGET_VOCABULARY
