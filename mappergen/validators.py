# File: mappergen/validators.py
"""
mappergen - Schema & Options Validators
=========================================
Cross-entity checks run on the parsed models before generation starts.

Pydantic already enforces the document's structure (and unique table
names).  This module adds what a single model cannot see on its own:
constraints that point at missing columns, relation kinds the generator
will skip, adapters with nowhere to import from.

Usage:
    from mappergen.validators import validate_full
    result = validate_full(schema, options)
    if not result.is_valid:
        print(result.format_report())
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from mappergen.models import GeneratorOptions, TblsSchema
from mappergen.utils import matches_name_or_pattern

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("mappergen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight error descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` items produced by the checks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    def add_error(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def is_valid(self) -> bool:
        return not any(e.is_error for e in self._items)

    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            prefix: str = {"error": "✗", "warning": "⚠", "info": "ℹ"}.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Schema checks
# ---------------------------------------------------------------------------


def validate_table_kinds(schema: TblsSchema) -> ValidationResult:
    """Warn about relations the generator will skip."""
    result: ValidationResult = ValidationResult()
    for table in schema.tables:
        if table.kind is None:
            result.add_warning(
                "UNKNOWN_TABLE_KIND",
                f"Table '{table.name}' has unrecognized type '{table.type}' "
                f"and will be skipped.",
                {"table": table.name, "type": table.type},
            )
        if not table.columns:
            result.add_warning(
                "TABLE_WITHOUT_COLUMNS",
                f"Table '{table.name}' has no columns.",
                {"table": table.name},
            )
    return result


def validate_constraints(schema: TblsSchema) -> ValidationResult:
    """Every column named by a constraint must exist on its table."""
    result: ValidationResult = ValidationResult()
    for table in schema.tables:
        col_names: Set[str] = {c.name for c in table.columns}
        for constraint in table.constraints:
            missing: List[str] = [c for c in constraint.columns if c not in col_names]
            if missing:
                result.add_error(
                    "CONSTRAINT_UNKNOWN_COLUMN",
                    f"Constraint '{constraint.name or constraint.type}' on table "
                    f"'{table.name}' references non-existent columns: {missing}",
                    {"table": table.name, "columns": missing},
                )
            if constraint.is_primary_key and len(constraint.columns) > 1:
                result.add_info(
                    "COMPOSITE_PRIMARY_KEY",
                    f"Table '{table.name}' has a composite primary key "
                    f"{constraint.columns}; no field is generated as a primary key.",
                    {"table": table.name},
                )
    return result


def validate_schema(schema: TblsSchema) -> ValidationResult:
    result: ValidationResult = ValidationResult()
    result.merge(validate_table_kinds(schema))
    result.merge(validate_constraints(schema))
    return result


# ---------------------------------------------------------------------------
# Options checks
# ---------------------------------------------------------------------------


def validate_options(options: GeneratorOptions) -> ValidationResult:
    """Adapters must have an import path of their own or a shared default."""
    result: ValidationResult = ValidationResult()
    shared_adapter_path: Optional[str] = options.common.type_adapter.import_path
    for index, mapping in enumerate(options.field_mappings):
        payload = mapping.field
        if payload is None or payload.type is None or payload.type.adapter is None:
            continue
        if not payload.type.adapter.import_path and not shared_adapter_path:
            result.add_error(
                "ADAPTER_WITHOUT_IMPORT_PATH",
                f"Field mapping #{index} uses adapter "
                f"'{payload.type.adapter.name}' without an import path and no "
                f"common.type_adapter.import_path is configured.",
                {"mapping": index},
            )
    return result


def validate_full(schema: TblsSchema, options: GeneratorOptions) -> ValidationResult:
    """Run every schema and options check; also flag filters that match nothing."""
    result: ValidationResult = ValidationResult()
    result.merge(validate_schema(schema))
    result.merge(validate_options(options))

    if options.tables is not None and options.tables.include:
        for entry in options.tables.include:
            if not any(matches_name_or_pattern(entry, t.name) for t in schema.tables):
                result.add_warning(
                    "INCLUDE_MATCHES_NOTHING",
                    f"Table filter include entry {entry!r} matches no table.",
                )

    if not result.is_valid:
        logger.error("Validation FAILED. %s", result.summary())
    else:
        logger.info("Validation PASSED. %s", result.summary())
    return result


__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_table_kinds",
    "validate_constraints",
    "validate_schema",
    "validate_options",
    "validate_full",
]
