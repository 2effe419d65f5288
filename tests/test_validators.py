"""
tests/test_validators.py
Unit tests for mappergen.validators.

Tests cover:
- ValidationResult bookkeeping and reporting
- Table kind and column presence warnings
- Constraint column references
- Adapter import path checks on options
- Full validation pipeline (validate_full)
"""

from __future__ import annotations

from typing import Any, Dict

from mappergen.models import GeneratorOptions, TblsSchema
from mappergen.validators import (
    ValidationError,
    ValidationResult,
    validate_constraints,
    validate_full,
    validate_options,
    validate_schema,
    validate_table_kinds,
)


# ===========================================================================
# ValidationResult
# ===========================================================================


class TestValidationResult:
    def test_empty_result_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert bool(result)
        assert len(result) == 0

    def test_warnings_keep_result_valid(self) -> None:
        result = ValidationResult()
        result.add_warning("W", "careful")
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_errors_invalidate(self) -> None:
        result = ValidationResult()
        result.add_error("E", "broken", {"table": "t"})
        assert not result.is_valid
        assert result.errors[0].context == {"table": "t"}
        assert "1 error(s)" in result.summary()

    def test_merge_and_report(self) -> None:
        first = ValidationResult()
        first.add_error("E", "broken")
        second = ValidationResult()
        second.add_info("I", "fyi")
        first.merge(second)
        assert first.codes() == ["E", "I"]
        assert "[E] broken" in first.format_report()
        assert "[I] fyi" not in first.format_report()
        assert "[I] fyi" in first.format_report(include_info=True)

    def test_error_repr(self) -> None:
        assert str(ValidationError("warning", "CODE", "msg")) == "[WARNING] CODE: msg"


# ===========================================================================
# Schema checks
# ===========================================================================


class TestSchemaChecks:
    def test_shop_schema_is_valid_with_warning(self, shop_schema: TblsSchema) -> None:
        result = validate_schema(shop_schema)
        assert result.is_valid
        assert result.codes() == ["UNKNOWN_TABLE_KIND"]

    def test_table_without_columns(self) -> None:
        schema = TblsSchema.model_validate(
            {"tables": [{"name": "empty", "type": "BASE TABLE", "columns": []}]}
        )
        assert validate_table_kinds(schema).codes() == ["TABLE_WITHOUT_COLUMNS"]

    def test_constraint_unknown_column(self, shop_schema_dict: Dict[str, Any]) -> None:
        shop_schema_dict["tables"][0]["constraints"][0]["columns"] = ["order_id"]
        result = validate_constraints(TblsSchema.model_validate(shop_schema_dict))
        assert not result.is_valid
        assert result.errors[0].code == "CONSTRAINT_UNKNOWN_COLUMN"
        assert result.errors[0].context["columns"] == ["order_id"]

    def test_composite_primary_key_is_info(self, shop_schema_dict: Dict[str, Any]) -> None:
        shop_schema_dict["tables"][0]["constraints"][0]["columns"] = ["id", "total"]
        result = validate_constraints(TblsSchema.model_validate(shop_schema_dict))
        assert result.is_valid
        assert result.codes() == ["COMPOSITE_PRIMARY_KEY"]


# ===========================================================================
# Options checks
# ===========================================================================


class TestOptionsChecks:
    def _with_adapter(self, options_dict: Dict[str, Any], **adapter: Any) -> GeneratorOptions:
        options_dict["field_mappings"] = [
            {
                "columnName": "total",
                "generatedField": {"type": {"adapter": {"name": "MoneyAdapter", **adapter}}},
            }
        ]
        return GeneratorOptions.model_validate(options_dict)

    def test_adapter_without_path(self, options_dict: Dict[str, Any]) -> None:
        result = validate_options(self._with_adapter(options_dict))
        assert result.codes() == ["ADAPTER_WITHOUT_IMPORT_PATH"]

    def test_adapter_with_own_path(self, options_dict: Dict[str, Any]) -> None:
        assert validate_options(self._with_adapter(options_dict, importPath="./a.ts")).is_valid

    def test_adapter_with_shared_path(self, options_dict: Dict[str, Any]) -> None:
        options_dict["common"] = {"type_adapter": {"import_path": "./adapters.ts"}}
        assert validate_options(self._with_adapter(options_dict)).is_valid


# ===========================================================================
# validate_full
# ===========================================================================


class TestValidateFull:
    def test_default_options_pass(self, shop_schema: TblsSchema, options: GeneratorOptions) -> None:
        result = validate_full(shop_schema, options)
        assert result.is_valid

    def test_include_matching_nothing(
        self, shop_schema: TblsSchema, options_dict: Dict[str, Any]
    ) -> None:
        options_dict["tables"] = {"include": ["orders", "invoices"]}
        result = validate_full(shop_schema, GeneratorOptions.model_validate(options_dict))
        assert result.is_valid
        assert "INCLUDE_MATCHES_NOTHING" in result.codes()
        assert any("invoices" in w.message for w in result.warnings)
