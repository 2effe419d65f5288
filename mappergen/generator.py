# File: mappergen/generator.py
"""
mappergen - Generation Pipeline (Orchestrator)
================================================

Connects every phase together:

    Schema document → per-table field resolution → imports & naming
                    → template rendering → file output

Workflow::

    1. Load the tbls schema document (JSON or YAML).
    2. Drop tables rejected by the include/exclude filters.
    3. Dispatch one asyncio task per remaining table; all run concurrently.
    4. Per table: skip unknown kinds (warning), resolve fields, classify
       column methods, resolve imports, derive names, render, write.
    5. Wait for every task to settle, then report.  If any table failed,
       raise ``GenerationFailedError`` listing every failure.

Error handling strategy:
    - A failing table never cancels its siblings.
    - Unknown relation kinds are skipped, not failed.
    - A table that fails before its write produces no file.

The only state shared between tables is the memoized rule table and the
compiled template; both are computed once per ``Generator`` and never
modified afterwards.
"""

from __future__ import annotations

import asyncio
import functools
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from mappergen.errors import GenerationFailedError, SchemaLoadError
from mappergen.exporters import DryRunRecorder, FileSystemSink, OutputSink
from mappergen.field_mappings import FIELD_MAPPINGS
from mappergen.imports import ImportResolver
from mappergen.models import (
    Column,
    FieldMapping,
    FieldTmplInput,
    GeneratorOptions,
    ImportTmplInput,
    Table,
    TableKind,
    TableTmplInput,
    TableTmplRef,
    TblsSchema,
)
from mappergen.naming import NamingTransformer
from mappergen.resolver import (
    FieldResolver,
    classify_column_method,
    find_primary_key,
    is_primary_key_autogenerated,
)
from mappergen.templates import TemplateRenderer
from mappergen.utils import Timer, format_doc_comment, matches_name_or_pattern

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("mappergen.generator")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class GenerationReport:
    """Outcome of one ``Generator.generate()`` run."""

    success: bool = False
    dry_run: bool = False
    output_directory: str = ""
    total_tables: int = 0
    generated_files: List[str] = field(default_factory=list)
    skipped_tables: List[str] = field(default_factory=list)
    filtered_tables: List[str] = field(default_factory=list)
    failures: Dict[str, BaseException] = field(default_factory=dict)
    total_elapsed_seconds: float = 0.0

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        if self.dry_run:
            status += " (dry run)"
        lines.append(f"{'='*60}")
        lines.append("  mappergen — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Tables in schema: {self.total_tables}")
        lines.append(f"  Files generated:  {len(self.generated_files)}")
        lines.append(f"  Filtered out:     {len(self.filtered_tables)}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")

        if self.skipped_tables:
            lines.append(f"{'─'*60}")
            lines.append(f"  Skipped Tables ({len(self.skipped_tables)}):")
            for name in self.skipped_tables:
                lines.append(f"    ⊘ {name}")

        if self.failures:
            lines.append(f"{'─'*60}")
            lines.append(f"  Failed Tables ({len(self.failures)}):")
            for name, exc in self.failures.items():
                lines.append(f"    ✗ {name}: {exc}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Document loading
# ---------------------------------------------------------------------------


def load_document(path: Path) -> Dict[str, Any]:
    """
    Read a JSON or YAML mapping from *path*.

    ``.json`` is parsed as JSON, ``.yaml``/``.yml`` as YAML; anything else
    goes through the YAML parser, which also accepts JSON.

    Raises:
        SchemaLoadError: missing file, parse error, or non-mapping top level.
    """
    if not path.is_file():
        raise SchemaLoadError(f"File not found: {path}")

    text: str = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data: Any = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SchemaLoadError(f"Invalid document {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise SchemaLoadError(
            f"Expected a mapping at top level of {path}, got {type(data).__name__}."
        )
    return data


def parse_schema(raw: Dict[str, Any]) -> TblsSchema:
    """Validate a raw tbls document into a ``TblsSchema``."""
    try:
        return TblsSchema.model_validate(raw)
    except PydanticValidationError as exc:
        raise SchemaLoadError(f"Schema validation failed: {exc}") from exc


def load_schema_file(path: Union[str, Path]) -> TblsSchema:
    schema: TblsSchema = parse_schema(load_document(Path(path)))
    logger.info("Loaded schema %s: %d table(s).", path, len(schema.tables))
    return schema


def load_options_file(
    path: Union[str, Path],
    overrides: Optional[Dict[str, Any]] = None,
) -> GeneratorOptions:
    """
    Load generator options from a YAML/JSON file.

    Relative paths inside the file are left as written; they resolve
    against the working directory, like paths given on the command line.
    """
    raw: Dict[str, Any] = load_document(Path(path))
    for key, value in (overrides or {}).items():
        # Drop the camelCase spelling so the override is the only one left.
        raw.pop(to_camel(key), None)
        raw[key] = value
    try:
        return GeneratorOptions.model_validate(raw)
    except PydanticValidationError as exc:
        raise SchemaLoadError(f"Options validation failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class Generator:
    """
    Programmatic entry point.

    Usage::

        generator = Generator({
            "schema_path": "./schema.yaml",
            "output_dir_path": "./src/generated",
            "connection_source_path": "./src/db/connection.ts",
        })
        report = generator.generate_sync()      # or: await generator.generate()
        print(report.summary())

    Subclasses can customise any step: override ``get_table_kind``,
    ``get_output_file_name``, ``pre_process_template_input`` or
    ``post_process_output``.
    """

    def __init__(
        self,
        options: Union[GeneratorOptions, Dict[str, Any]],
        *,
        sink: Optional[OutputSink] = None,
    ) -> None:
        self.options: GeneratorOptions = (
            options
            if isinstance(options, GeneratorOptions)
            else GeneratorOptions.model_validate(options)
        )
        self.naming: NamingTransformer = NamingTransformer(self.options.naming)
        self.import_resolver: ImportResolver = ImportResolver(
            self.options.common.type_adapter.import_path
        )
        self.renderer: TemplateRenderer = TemplateRenderer(self.options.template_path)
        self.sink: OutputSink = sink if sink is not None else FileSystemSink()
        self.dry_run_recorder: DryRunRecorder = DryRunRecorder()

        logger.debug(
            "Generator initialised: schema=%s, output=%s, dry_run=%s.",
            self.options.schema_path,
            self.options.output_dir_path,
            self.options.dry_run,
        )

    # -----------------------------------------------------------------
    # Shared caches
    # -----------------------------------------------------------------

    @functools.cached_property
    def field_mappings(self) -> Tuple[FieldMapping, ...]:
        """User rules in supplied order, then the built-in defaults."""
        return tuple(self.options.field_mappings) + FIELD_MAPPINGS

    @functools.cached_property
    def field_resolver(self) -> FieldResolver:
        return FieldResolver(self.field_mappings)

    # -----------------------------------------------------------------
    # Public: generate
    # -----------------------------------------------------------------

    async def load_schema(self) -> TblsSchema:
        return await asyncio.to_thread(load_schema_file, self.options.schema_path)

    async def generate(self) -> GenerationReport:
        """
        Generate one module per table, concurrently.

        Returns:
            GenerationReport when every table succeeded or was skipped.

        Raises:
            SchemaLoadError: the schema document could not be loaded.
            GenerationFailedError: at least one table failed; raised only
                after all tables have settled.
        """
        report: GenerationReport = GenerationReport(
            dry_run=self.options.dry_run,
            output_directory=str(Path(self.options.output_dir_path).resolve()),
        )
        started: float = time.perf_counter()

        schema: TblsSchema = await self.load_schema()
        report.total_tables = len(schema.tables)

        selected: List[Table] = []
        for table in schema.tables:
            if self.should_process(table):
                selected.append(table)
            else:
                logger.debug("Table %s rejected by table filters.", table.name)
                report.filtered_tables.append(table.name)

        outcomes: List[Any] = await asyncio.gather(
            *(self.generate_table_mapper(table) for table in selected),
            return_exceptions=True,
        )

        for table, outcome in zip(selected, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Generation failed for table %s: %s: %s",
                    table.name,
                    type(outcome).__name__,
                    outcome,
                )
                report.failures[table.name] = outcome
            elif outcome is None:
                report.skipped_tables.append(table.name)
            else:
                report.generated_files.append(str(outcome))

        report.total_elapsed_seconds = time.perf_counter() - started
        report.success = not report.failures

        if report.failures:
            raise GenerationFailedError(report.failures, report)

        logger.info(
            "Generated %d file(s) from %d table(s) in %.3fs.",
            len(report.generated_files),
            report.total_tables,
            report.total_elapsed_seconds,
        )
        return report

    def generate_sync(self) -> GenerationReport:
        """Run ``generate()`` on a fresh event loop."""
        return asyncio.run(self.generate())

    # -----------------------------------------------------------------
    # Table selection
    # -----------------------------------------------------------------

    def should_process(self, table: Table) -> bool:
        table_filter = self.options.tables
        if table_filter is None:
            return True
        if table_filter.include is not None and not any(
            matches_name_or_pattern(entry, table.name) for entry in table_filter.include
        ):
            return False
        if table_filter.exclude is not None and any(
            matches_name_or_pattern(entry, table.name) for entry in table_filter.exclude
        ):
            return False
        return True

    def get_table_kind(self, table: Table) -> Optional[TableKind]:
        return table.kind

    # -----------------------------------------------------------------
    # Per-table unit of work
    # -----------------------------------------------------------------

    async def generate_table_mapper(self, table: Table) -> Optional[Path]:
        """
        Render and write the module for one table.

        Returns the output path, or ``None`` when the table was skipped.
        """
        kind: Optional[TableKind] = self.get_table_kind(table)
        if kind is None:
            logger.warning(
                "Unknown table type %s for table %s: SKIPPING", table.type, table.name
            )
            return None

        with Timer(f"resolve {table.name}"):
            template_input: TableTmplInput = self.build_template_input(table, kind)

        template_input = await self.pre_process_template_input(template_input)
        output: str = await self.renderer.render(template_input)
        output = await self.post_process_output(output, table)

        file_path: Path = self.get_output_file_path(table, kind)
        if self.options.dry_run:
            self.dry_run_recorder.record(file_path, output)
        else:
            await asyncio.to_thread(self.sink.ensure_directory, file_path.parent)
            await asyncio.to_thread(self.sink.write_file, file_path, output)
        return file_path

    def build_fields(self, table: Table, pk_col: Optional[Column]) -> List[FieldTmplInput]:
        """Resolve one field descriptor per non-omitted column."""
        resolver: FieldResolver = self.field_resolver
        fields: List[FieldTmplInput] = []
        for col in table.columns:
            if resolver.is_omitted(table.name, col):
                continue
            is_pk: bool = pk_col is not None and col is pk_col
            is_optional: bool = resolver.is_optional(table.name, col)
            has_default: bool = resolver.has_default(table.name, col)
            is_computed: bool = resolver.is_computed(table.name, col)
            column_method = classify_column_method(
                is_primary_key=is_pk,
                is_autogenerated=is_pk and is_primary_key_autogenerated(col, self.options),
                is_computed=is_computed,
                is_optional=is_optional,
                has_default=has_default,
            )
            fields.append(
                FieldTmplInput(
                    name=resolver.field_name(table.name, col),
                    column_method=column_method,
                    column_name=col.name,
                    is_optional=is_optional,
                    has_default=has_default,
                    field_type=resolver.field_type(table.name, col),
                    comment=format_doc_comment(col.comment),
                )
            )
        return fields

    def build_template_input(self, table: Table, kind: TableKind) -> TableTmplInput:
        """Assemble fields, imports and names into one render input."""
        pk_col: Optional[Column] = find_primary_key(table, self.options)
        fields: List[FieldTmplInput] = self.build_fields(table, pk_col)

        file_path: Path = self.get_output_file_path(table, kind)
        imports: List[ImportTmplInput] = self.import_resolver.resolve(file_path, fields)
        adapter_imports: List[ImportTmplInput] = self.import_resolver.adapter_imports(
            file_path, fields
        )

        export = self.options.export
        row_types: Optional[Dict[str, str]] = (
            self.naming.row_type_names(table.name, kind) if export.row_types else None
        )
        values_types: Optional[Dict[str, str]] = (
            self.naming.values_type_names(table.name, kind) if export.values_types else None
        )
        col_set_name: Optional[str] = (
            self.naming.columns_object_name(table.name, kind)
            if export.extracted_columns
            else None
        )
        inst_name: Optional[str] = (
            self.naming.instance_name(table.name, kind)
            if export.table_instances or col_set_name
            else None
        )
        table_mapping = self.options.table_mapping

        return TableTmplInput(
            table=TableTmplRef(
                name=table.name if table_mapping.use_qualified_table_name else table.short_name,
                kind=kind,
                comment=format_doc_comment(table.comment),
                id_prefix=self.naming.id_prefix(table, table_mapping),
            ),
            imports=imports,
            adapter_imports=adapter_imports,
            db_connection_source=self.import_resolver.connection_source_import_path(
                file_path, self.options.connection_source_path
            ),
            class_name=self.naming.class_name(table.name, kind),
            inst_name=inst_name,
            col_set_name=col_set_name,
            fields=fields,
            export_table_class=export.table_classes,
            export_row_types=row_types,
            export_values_types=values_types,
            import_extra_types=bool(row_types or values_types),
        )

    # -----------------------------------------------------------------
    # Output location
    # -----------------------------------------------------------------

    def get_output_file_name(self, table: Table, kind: TableKind) -> str:
        return self.naming.output_file_name(table.name, kind)

    def get_output_file_path(self, table: Table, kind: TableKind) -> Path:
        return Path(self.options.output_dir_path) / self.get_output_file_name(table, kind)

    # -----------------------------------------------------------------
    # Extension hooks
    # -----------------------------------------------------------------

    async def pre_process_template_input(self, template_input: TableTmplInput) -> TableTmplInput:
        return template_input

    async def post_process_output(self, output: str, table: Table) -> str:
        return output


__all__: List[str] = [
    "Generator",
    "GenerationReport",
    "load_document",
    "parse_schema",
    "load_schema_file",
    "load_options_file",
]
