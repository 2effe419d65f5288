# File: mappergen/models.py
"""
mappergen - Core Data Models
==============================
Pydantic V2 models for every entity that flows through the generator:

    Schema document (tbls dump)  →  Mapping rules + Options  →  Render inputs

The schema-side models (``Column``, ``Constraint``, ``Table``, ``TblsSchema``)
are frozen: the generator reads them, it never mutates them.

Mapping-rule and options models accept both snake_case and camelCase keys
so hand-written camelCase option files validate as-is.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Set, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TableKind(str, Enum):
    """Kinds of relations a mapper class can be generated for."""

    TABLE = "Table"
    VIEW = "View"


class ColumnMethod(str, Enum):
    """
    The eight mutually exclusive access strategies of a generated field.

    Values are the ts-sql-query method names emitted into the mapper class.
    """

    COLUMN = "column"
    OPTIONAL_COLUMN = "optionalColumn"
    COLUMN_WITH_DEFAULT_VALUE = "columnWithDefaultValue"
    OPTIONAL_COLUMN_WITH_DEFAULT_VALUE = "optionalColumnWithDefaultValue"
    COMPUTED_COLUMN = "computedColumn"
    OPTIONAL_COMPUTED_COLUMN = "optionalComputedColumn"
    PRIMARY_KEY = "primaryKey"
    AUTOGENERATED_PRIMARY_KEY = "autogeneratedPrimaryKey"


# Raw tbls "type" strings (lower-cased) → table kind
TABLE_KIND_BY_TYPE: Dict[str, TableKind] = {
    "base table": TableKind.TABLE,
    "table": TableKind.TABLE,
    "view": TableKind.VIEW,
}

PRIMARY_KEY_CONSTRAINT: str = "PRIMARY KEY"

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

# Schema documents carry many keys we do not consume (indexes, triggers, ...).
_SCHEMA_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)

_OPTIONS_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    alias_generator=to_camel,
    validate_assignment=True,
    arbitrary_types_allowed=True,
    extra="forbid",
)

# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------

#: A matcher is a wildcard (None), a literal dotted-suffix string, or a regex.
Matcher = Optional[Union[str, re.Pattern[str]]]

_REGEX_FLAGS: Dict[str, int] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def coerce_matcher(value: Any) -> Any:
    """
    Turn the config-file spelling of a regex matcher into a compiled pattern.

    ``{"regex": "^audit_", "flags": "i"}`` becomes ``re.compile("^audit_", re.I)``.
    Plain strings stay literal suffix matchers; compiled patterns pass through.
    """
    if isinstance(value, dict):
        if "regex" not in value:
            raise ValueError(
                f"Matcher mapping must have a 'regex' key, got keys {sorted(value)}."
            )
        flags: int = 0
        for letter in str(value.get("flags") or ""):
            if letter not in _REGEX_FLAGS:
                raise ValueError(f"Unsupported regex flag '{letter}'.")
            flags |= _REGEX_FLAGS[letter]
        try:
            return re.compile(value["regex"], flags)
        except re.error as exc:
            raise ValueError(f"Invalid regex {value['regex']!r}: {exc}") from exc
    return value


# ---------------------------------------------------------------------------
# Schema document (tbls)
# ---------------------------------------------------------------------------


class Column(BaseModel):
    """A single column as described by the schema document."""

    model_config = _SCHEMA_CONFIG

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, description="Raw database type name.")
    nullable: bool = Field(default=False)
    default: Optional[str] = Field(
        default=None, description="Default value literal or SQL expression."
    )
    comment: Optional[str] = Field(default=None)

    @field_validator("default", mode="before")
    @classmethod
    def _stringify_default(cls, v: Any) -> Any:
        # YAML loaders turn `default: 0` into an int; keep the literal text.
        if v is None or isinstance(v, str):
            return v
        return str(v)

    def __repr__(self) -> str:
        return f"<Column {self.name}: {self.type}{'?' if self.nullable else ''}>"


class Constraint(BaseModel):
    """Table constraint; only ``PRIMARY KEY`` constraints are consumed."""

    model_config = _SCHEMA_CONFIG

    name: Optional[str] = Field(default=None)
    type: str = Field(..., min_length=1)
    definition: Optional[str] = Field(default=None, alias="def")
    columns: List[str] = Field(default_factory=list)

    @property
    def is_primary_key(self) -> bool:
        return self.type.upper() == PRIMARY_KEY_CONSTRAINT


class Table(BaseModel):
    """A table or view from the schema document."""

    model_config = _SCHEMA_CONFIG

    name: str = Field(..., min_length=1, description="Possibly schema-qualified name.")
    type: str = Field(..., description="Raw relation type, e.g. 'BASE TABLE' or 'VIEW'.")
    comment: Optional[str] = Field(default=None)
    columns: List[Column] = Field(default_factory=list)
    constraints: List[Constraint] = Field(default_factory=list)

    @property
    def kind(self) -> Optional[TableKind]:
        """Recognized kind, or ``None`` when the raw type is unknown."""
        return TABLE_KIND_BY_TYPE.get(self.type.strip().lower())

    @property
    def short_name(self) -> str:
        """Last dot-separated segment of the qualified name."""
        return self.name.split(".")[-1]

    def get_column(self, name: str) -> Optional[Column]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def __repr__(self) -> str:
        return f"<Table {self.name} ({self.type}, {len(self.columns)} cols)>"


class TblsSchema(BaseModel):
    """
    Root of a tbls schema dump.

    Table names must be unique; the document is rejected otherwise.
    """

    model_config = _SCHEMA_CONFIG

    name: Optional[str] = Field(default=None)
    tables: List[Table] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_unique_table_names(self) -> "TblsSchema":
        seen: Set[str] = set()
        dupes: List[str] = []
        for tbl in self.tables:
            if tbl.name in seen:
                dupes.append(tbl.name)
            seen.add(tbl.name)
        if dupes:
            raise ValueError(f"Duplicate table names in schema: {dupes}")
        return self

    @property
    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]


# ---------------------------------------------------------------------------
# Field mapping rules
# ---------------------------------------------------------------------------


class ImportedItem(BaseModel):
    """A name imported into the generated module (a type or an adapter)."""

    model_config = _OPTIONS_CONFIG

    name: Optional[str] = Field(default=None)
    import_path: Optional[str] = Field(default=None)
    is_default: bool = Field(
        default=False, description="Default import rather than a named import."
    )
    is_relative: Optional[bool] = Field(
        default=None,
        description="Only an explicit False marks the path as an external module.",
    )


class DbType(BaseModel):
    """Database type name surfaced in the generated column declaration."""

    model_config = _OPTIONS_CONFIG

    name: Optional[str] = Field(default=None)


class GeneratedFieldType(BaseModel):
    """
    Target type of a generated field.

    ``kind`` is the ts-sql-query custom value kind (``custom``,
    ``customComparable``, ``enum``, ...).  When it is unset the field is a
    built-in ts-sql-query type named by ``db_type.name``.
    """

    model_config = _OPTIONS_CONFIG

    kind: Optional[str] = Field(default=None)
    ts_type: Optional[ImportedItem] = Field(default=None)
    db_type: Optional[DbType] = Field(default=None)
    adapter: Optional[ImportedItem] = Field(default=None)


class GeneratedField(BaseModel):
    """Partial field descriptor; every attribute left unset falls through."""

    model_config = _OPTIONS_CONFIG

    name: Optional[str] = Field(default=None)
    is_optional: Optional[bool] = Field(default=None)
    has_default: Optional[bool] = Field(default=None)
    is_computed: Optional[bool] = Field(default=None)
    type: Optional[GeneratedFieldType] = Field(default=None)


class FieldMapping(BaseModel):
    """
    One mapping rule.

    The three matchers select columns; ``generated_field`` is either
    ``False`` (omit the column) or a partial ``GeneratedField``.
    ``omit: true`` is accepted as a shorthand for ``generated_field: false``.
    """

    model_config = _OPTIONS_CONFIG

    table_name: Matcher = Field(default=None)
    column_name: Matcher = Field(default=None)
    column_type: Matcher = Field(default=None)
    generated_field: Union[Literal[False], GeneratedField]

    @model_validator(mode="before")
    @classmethod
    def _expand_omit_shorthand(cls, data: Any) -> Any:
        if isinstance(data, dict) and "omit" in data:
            data = dict(data)
            omit: Any = data.pop("omit")
            if omit is True:
                if data.get("generated_field", data.get("generatedField")):
                    raise ValueError(
                        "A mapping cannot both omit a column and describe its field."
                    )
                data.pop("generatedField", None)
                data["generated_field"] = False
        return data

    @field_validator("table_name", "column_name", "column_type", mode="before")
    @classmethod
    def _coerce_matchers(cls, v: Any) -> Any:
        return coerce_matcher(v)

    @property
    def omits(self) -> bool:
        return self.generated_field is False

    @property
    def field(self) -> Optional[GeneratedField]:
        return None if self.generated_field is False else self.generated_field


# ---------------------------------------------------------------------------
# Generator options
# ---------------------------------------------------------------------------


class TableFilter(BaseModel):
    """Include/exclude lists; each entry is a literal-suffix or regex matcher."""

    model_config = _OPTIONS_CONFIG

    include: Optional[List[Union[str, re.Pattern[str]]]] = Field(default=None)
    exclude: Optional[List[Union[str, re.Pattern[str]]]] = Field(default=None)

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _coerce_entries(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, (str, dict)) or hasattr(v, "pattern"):
            v = [v]
        return [coerce_matcher(item) for item in v]


class NamingOptions(BaseModel):
    """Prefix/suffix pairs wrapped around the Pascal/camel-cased table name."""

    model_config = _OPTIONS_CONFIG

    table_class_name_prefix: str = ""
    table_class_name_suffix: str = "Table"
    view_class_name_prefix: str = ""
    view_class_name_suffix: str = "View"
    table_instance_name_prefix: str = "t"
    table_instance_name_suffix: str = ""
    view_instance_name_prefix: str = "v"
    view_instance_name_suffix: str = ""
    table_columns_name_prefix: str = ""
    table_columns_name_suffix: str = "Cols"
    view_columns_name_prefix: str = ""
    view_columns_name_suffix: str = "Cols"
    insertable_row_type_name_prefix: str = "Insertable"
    insertable_row_type_name_suffix: str = "Row"
    updatable_row_type_name_prefix: str = "Updatable"
    updatable_row_type_name_suffix: str = "Row"
    selected_row_type_name_prefix: str = ""
    selected_row_type_name_suffix: str = "Row"
    insertable_values_type_name_prefix: str = "Insertable"
    insertable_values_type_name_suffix: str = ""
    updatable_values_type_name_prefix: str = "Updatable"
    updatable_values_type_name_suffix: str = ""
    selected_values_type_name_prefix: str = ""
    selected_values_type_name_suffix: str = ""


class ExportOptions(BaseModel):
    """Which artifacts each generated module exports."""

    model_config = _OPTIONS_CONFIG

    table_classes: bool = True
    row_types: bool = False
    values_types: bool = False
    table_instances: bool = False
    extracted_columns: bool = False


class PrimaryKeyOptions(BaseModel):
    model_config = _OPTIONS_CONFIG

    name: Optional[str] = Field(
        default=None, description="Column name treated as the primary key in every table."
    )
    is_auto_generated: Optional[bool] = Field(default=None)


class TypeAdapterOptions(BaseModel):
    model_config = _OPTIONS_CONFIG

    import_path: Optional[str] = Field(
        default=None, description="Fallback module for adapters without their own path."
    )


class CommonOptions(BaseModel):
    model_config = _OPTIONS_CONFIG

    primary_key: PrimaryKeyOptions = Field(default_factory=PrimaryKeyOptions)
    type_adapter: TypeAdapterOptions = Field(default_factory=TypeAdapterOptions)


class TableMappingOptions(BaseModel):
    model_config = _OPTIONS_CONFIG

    use_qualified_table_name: bool = False
    id_prefix: Optional[str] = None


class GeneratorOptions(BaseModel):
    """
    Validated generator configuration.

    Validated and defaulted once when the ``Generator`` is constructed; the
    core never re-validates it.
    """

    model_config = _OPTIONS_CONFIG

    schema_path: str = Field(..., min_length=1)
    output_dir_path: str = Field(..., min_length=1)
    connection_source_path: str = Field(..., min_length=1)
    tables: Optional[TableFilter] = Field(default=None)
    field_mappings: List[FieldMapping] = Field(default_factory=list)
    naming: NamingOptions = Field(default_factory=NamingOptions)
    export: ExportOptions = Field(default_factory=ExportOptions)
    common: CommonOptions = Field(default_factory=CommonOptions)
    table_mapping: TableMappingOptions = Field(default_factory=TableMappingOptions)
    template_path: Optional[str] = Field(
        default=None, description="Custom Jinja2 template replacing the bundled one."
    )
    dry_run: bool = False


# ---------------------------------------------------------------------------
# Render inputs
# ---------------------------------------------------------------------------

_RENDER_CONFIG: ConfigDict = ConfigDict(
    populate_by_name=True,
    use_enum_values=True,
    extra="forbid",
)


class FieldTmplInput(BaseModel):
    """Render-ready description of one generated field."""

    model_config = _RENDER_CONFIG

    name: str
    column_method: ColumnMethod
    column_name: str
    is_optional: bool
    has_default: bool
    field_type: GeneratedFieldType
    comment: Optional[str] = None


class ImportTmplInput(BaseModel):
    """One resolved import statement."""

    model_config = _RENDER_CONFIG

    import_path: str
    imported: List[str]
    is_default: bool


class TableTmplRef(BaseModel):
    model_config = _RENDER_CONFIG

    name: str
    kind: TableKind
    comment: Optional[str] = None
    id_prefix: Optional[str] = None


class TableTmplInput(BaseModel):
    """Everything the template needs to render one table mapper module."""

    model_config = _RENDER_CONFIG

    table: TableTmplRef
    imports: List[ImportTmplInput]
    adapter_imports: List[ImportTmplInput]
    db_connection_source: str
    class_name: str
    inst_name: Optional[str] = None
    col_set_name: Optional[str] = None
    fields: List[FieldTmplInput]
    export_table_class: bool = True
    export_row_types: Optional[Dict[str, str]] = None
    export_values_types: Optional[Dict[str, str]] = None
    import_extra_types: bool = False


__all__: List[str] = [
    "TableKind",
    "ColumnMethod",
    "TABLE_KIND_BY_TYPE",
    "PRIMARY_KEY_CONSTRAINT",
    "Matcher",
    "coerce_matcher",
    "Column",
    "Constraint",
    "Table",
    "TblsSchema",
    "ImportedItem",
    "DbType",
    "GeneratedFieldType",
    "GeneratedField",
    "FieldMapping",
    "TableFilter",
    "NamingOptions",
    "ExportOptions",
    "PrimaryKeyOptions",
    "TypeAdapterOptions",
    "CommonOptions",
    "TableMappingOptions",
    "GeneratorOptions",
    "FieldTmplInput",
    "ImportTmplInput",
    "TableTmplRef",
    "TableTmplInput",
]
