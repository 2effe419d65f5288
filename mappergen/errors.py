# File: mappergen/errors.py
"""
mappergen - Exception Taxonomy
================================

Every error raised by the generation core derives from ``MapperGenError``
so callers can catch the whole family at once.

Severity:
    - ``UnresolvedTypeError``    — fatal for the enclosing table.
    - ``AdapterImportPathError`` — fatal for the enclosing table.
    - ``InvalidIdentifierError`` — fatal for the enclosing table.
    - ``SchemaLoadError``        — fatal for the whole run (nothing to do).
    - ``GenerationFailedError``  — aggregate raised after all tables settled.

An unrecognized table kind is NOT an error; it is logged and skipped.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class MapperGenError(Exception):
    """Base class for all mappergen errors."""


class UnresolvedTypeError(MapperGenError):
    """No mapping rule defines a field type for a column."""

    def __init__(self, table_name: str, column_name: str, column_type: str) -> None:
        self.table_name: str = table_name
        self.column_name: str = column_name
        self.column_type: str = column_type
        super().__init__(
            f"Failed to infer field type for {table_name}.{column_name} "
            f"(database type '{column_type}'). Add a field mapping that "
            f"defines 'type' for this column."
        )


class AdapterImportPathError(MapperGenError):
    """An adapter reference has neither its own import path nor a shared default."""

    def __init__(self, adapter: Any) -> None:
        self.adapter: Any = adapter
        description: Any = (
            adapter.model_dump(exclude_none=True)
            if hasattr(adapter, "model_dump")
            else adapter
        )
        super().__init__(
            f"Unable to resolve import path for type adapter: {description}"
        )


class InvalidIdentifierError(MapperGenError, ValueError):
    """A name has no letters or digits to build an identifier from."""

    def __init__(self, name: str) -> None:
        self.name: str = name
        super().__init__(
            f"Cannot derive an identifier from {name!r}: it contains no "
            f"letters or digits. Add a field mapping that sets 'name'."
        )


class SchemaLoadError(MapperGenError):
    """The schema or options document could not be read or parsed."""


class GenerationFailedError(MapperGenError):
    """
    One or more tables failed to generate.

    Raised only after every table's unit of work has settled.  ``failures``
    maps the qualified table name to the exception it raised.
    """

    def __init__(
        self,
        failures: Dict[str, BaseException],
        report: Optional[Any] = None,
    ) -> None:
        self.failures: Dict[str, BaseException] = dict(failures)
        self.report: Optional[Any] = report
        lines: List[str] = [
            f"{name}: {type(exc).__name__}: {exc}"
            for name, exc in self.failures.items()
        ]
        super().__init__(
            f"Generation failed for {len(self.failures)} table(s):\n  "
            + "\n  ".join(lines)
        )


__all__: List[str] = [
    "MapperGenError",
    "UnresolvedTypeError",
    "AdapterImportPathError",
    "InvalidIdentifierError",
    "SchemaLoadError",
    "GenerationFailedError",
]
