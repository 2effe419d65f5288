# File: mappergen/__init__.py
"""
mappergen — ts-sql-query Table Mapper Generator
=================================================

Reads a database schema dump produced by tbls (JSON/YAML) and writes one
TypeScript module per table or view, declaring a ts-sql-query ``Table`` /
``View`` subclass whose fields mirror the columns.

Architecture overview::

    ┌──────────────┐     ┌───────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│   Generator    │────▶│ TemplateRenderer │
    │   (cli.py)   │     │ (generator.py) │     │  (templates.py)  │
    └──────────────┘     └───────┬───────┘     └──────────────────┘
                                 │
          ┌───────────┬──────────┼───────────┬───────────┐
          ▼           ▼          ▼           ▼           ▼
    ┌──────────┐ ┌─────────┐ ┌────────┐ ┌─────────┐ ┌───────────┐
    │ resolver │ │ imports │ │ naming │ │ models  │ │ exporters │
    └──────────┘ └─────────┘ └────────┘ └─────────┘ └───────────┘

Usage::

    # As a library
    from mappergen import Generator
    report = Generator({
        "schema_path": "schema.json",
        "output_dir_path": "src/generated",
        "connection_source_path": "src/db/connection.ts",
    }).generate_sync()

    # From the command line
    python -m mappergen -c mappergen.yaml --verbose

Public API:
    - Generator          — Orchestrator
    - GeneratorOptions   — Generator settings model
    - TblsSchema         — Schema document model
    - FieldResolver      — Rule-based column resolution
    - ImportResolver     — Import statement collection
    - NamingTransformer  — Identifier derivation
    - validate_full      — Schema/options validation entry point
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from mappergen.errors import (
    AdapterImportPathError,
    GenerationFailedError,
    InvalidIdentifierError,
    MapperGenError,
    SchemaLoadError,
    UnresolvedTypeError,
)
from mappergen.models import (
    Column,
    ColumnMethod,
    Constraint,
    FieldMapping,
    GeneratedField,
    GeneratedFieldType,
    GeneratorOptions,
    ImportedItem,
    Table,
    TableKind,
    TblsSchema,
)
from mappergen.field_mappings import FIELD_MAPPINGS
from mappergen.resolver import FieldResolver, classify_column_method, find_primary_key
from mappergen.imports import ImportResolver
from mappergen.naming import NamingTransformer
from mappergen.validators import ValidationResult, validate_full
from mappergen.templates import TemplateRenderer
from mappergen.exporters import DryRunRecorder, FileSystemSink
from mappergen.generator import (
    GenerationReport,
    Generator,
    load_options_file,
    load_schema_file,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Core orchestrator
    "Generator",
    "GenerationReport",
    "load_options_file",
    "load_schema_file",
    # Models
    "Column",
    "ColumnMethod",
    "Constraint",
    "FieldMapping",
    "GeneratedField",
    "GeneratedFieldType",
    "GeneratorOptions",
    "ImportedItem",
    "Table",
    "TableKind",
    "TblsSchema",
    # Resolution
    "FIELD_MAPPINGS",
    "FieldResolver",
    "classify_column_method",
    "find_primary_key",
    "ImportResolver",
    "NamingTransformer",
    # Validation
    "validate_full",
    "ValidationResult",
    # Rendering & output
    "TemplateRenderer",
    "FileSystemSink",
    "DryRunRecorder",
    # Errors
    "MapperGenError",
    "UnresolvedTypeError",
    "AdapterImportPathError",
    "SchemaLoadError",
    "GenerationFailedError",
    "InvalidIdentifierError",
]
