# File: mappergen/resolver.py
"""
mappergen - Field Resolver & Column Method Classifier
=======================================================

Turns each schema column into a field descriptor by consulting the ordered
mapping rule table (user rules first, then built-ins).

Every attribute is resolved by its own top-to-bottom scan: the first rule
whose three matchers accept the column AND which defines that attribute
wins.  A column can therefore take its name from one rule and its type from
another, lower-priority rule.

Queries and their fallbacks:

    is_omitted   → False
    is_optional  → column.nullable
    has_default  → column.default is not None
    is_computed  → False
    field_name   → camelCase(column.name)
    field_type   → (none) raises UnresolvedTypeError
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from mappergen.errors import UnresolvedTypeError
from mappergen.models import (
    Column,
    ColumnMethod,
    DbType,
    FieldMapping,
    GeneratedField,
    GeneratedFieldType,
    GeneratorOptions,
    ImportedItem,
    Table,
)
from mappergen.utils import matches_name_or_pattern, to_camel_case, to_pascal_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("mappergen.resolver")

UNKNOWN_TS_TYPE: str = "unknown"


# ---------------------------------------------------------------------------
# Field resolver
# ---------------------------------------------------------------------------


class FieldResolver:
    """
    Answers per-column questions against an ordered rule table.

    The rule table is held as a tuple and never modified, so one resolver
    can be shared by every table of a run.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[FieldMapping]) -> None:
        self._rules: Tuple[FieldMapping, ...] = tuple(rules)

    @property
    def rules(self) -> Tuple[FieldMapping, ...]:
        return self._rules

    # -- Matching -----------------------------------------------------------

    @staticmethod
    def rule_applies(rule: FieldMapping, table_name: str, col: Column) -> bool:
        """True when all three matchers of *rule* accept the column."""
        return (
            matches_name_or_pattern(rule.column_name, col.name)
            and matches_name_or_pattern(rule.table_name, table_name)
            and matches_name_or_pattern(rule.column_type, col.type)
        )

    def find_field(
        self,
        table_name: str,
        col: Column,
        defines: Callable[[GeneratedField], bool],
    ) -> Optional[GeneratedField]:
        """First applicable field payload for which *defines* holds."""
        for rule in self._rules:
            payload: Optional[GeneratedField] = rule.field
            if payload is None or not defines(payload):
                continue
            if self.rule_applies(rule, table_name, col):
                return payload
        return None

    # -- Queries ------------------------------------------------------------

    def is_omitted(self, table_name: str, col: Column) -> bool:
        for rule in self._rules:
            if rule.omits and self.rule_applies(rule, table_name, col):
                logger.debug("Column %s.%s omitted by mapping.", table_name, col.name)
                return True
        return False

    def is_optional(self, table_name: str, col: Column) -> bool:
        found = self.find_field(table_name, col, lambda f: f.is_optional is not None)
        if found is not None:
            return found.is_optional is True
        return col.nullable is True

    def has_default(self, table_name: str, col: Column) -> bool:
        found = self.find_field(table_name, col, lambda f: f.has_default is not None)
        if found is not None:
            return found.has_default is True
        return col.default is not None

    def is_computed(self, table_name: str, col: Column) -> bool:
        found = self.find_field(table_name, col, lambda f: f.is_computed is not None)
        if found is not None:
            return found.is_computed is True
        return False

    def field_name(self, table_name: str, col: Column) -> str:
        found = self.find_field(table_name, col, lambda f: bool(f.name))
        if found is not None and found.name:
            return found.name
        return to_camel_case(col.name)

    def field_type(self, table_name: str, col: Column) -> GeneratedFieldType:
        """
        Resolve the target type of a column.

        ``db_type.name`` falls back to the column's raw type.  When the rule
        supplies an adapter but no TypeScript type name, the name is the
        PascalCase form of the database type name.

        Raises:
            UnresolvedTypeError: no applicable rule defines ``type``.
        """
        found = self.find_field(table_name, col, lambda f: f.type is not None)
        if found is None or found.type is None:
            raise UnresolvedTypeError(table_name, col.name, col.type)

        declared: GeneratedFieldType = found.type
        db_type_name: str = (
            declared.db_type.name
            if declared.db_type is not None and declared.db_type.name
            else col.type
        )
        ts_type_name: Optional[str] = (
            declared.ts_type.name if declared.ts_type is not None else None
        )
        if declared.adapter is not None and not ts_type_name:
            ts_type_name = to_pascal_case(db_type_name)

        ts_type: ImportedItem = (
            declared.ts_type.model_copy(update={"name": ts_type_name or UNKNOWN_TS_TYPE})
            if declared.ts_type is not None
            else ImportedItem(name=ts_type_name or UNKNOWN_TS_TYPE)
        )
        db_type: DbType = (
            declared.db_type.model_copy(update={"name": db_type_name})
            if declared.db_type is not None
            else DbType(name=db_type_name)
        )
        return declared.model_copy(update={"ts_type": ts_type, "db_type": db_type})


# ---------------------------------------------------------------------------
# Primary key discovery
# ---------------------------------------------------------------------------


def find_primary_key(table: Table, options: Optional[GeneratorOptions] = None) -> Optional[Column]:
    """
    Return the column acting as the table's primary key, if there is one.

    A shared primary-key column name from the options takes precedence.
    Otherwise only a single-column ``PRIMARY KEY`` constraint yields a key:
    composite keys are reported as "no primary key".
    """
    common_pk_name: Optional[str] = (
        options.common.primary_key.name if options is not None else None
    )
    if common_pk_name:
        col: Optional[Column] = table.get_column(common_pk_name)
        if col is not None:
            return col

    for constraint in table.constraints:
        if not constraint.is_primary_key:
            continue
        if len(constraint.columns) == 1:
            return table.get_column(constraint.columns[0])
        logger.debug(
            "Table %s has a composite primary key %s; no key column resolved.",
            table.name,
            constraint.columns,
        )
        return None
    return None


# ---------------------------------------------------------------------------
# Column method classifier
# ---------------------------------------------------------------------------


def classify_column_method(
    *,
    is_primary_key: bool,
    is_autogenerated: bool,
    is_computed: bool,
    is_optional: bool,
    has_default: bool,
) -> ColumnMethod:
    """
    Pick one of the eight access strategies.

    Priority: primary key, then computed, then the (optional, default) pair.
    ``is_autogenerated`` only matters for the primary key.
    """
    if is_primary_key:
        if is_autogenerated:
            return ColumnMethod.AUTOGENERATED_PRIMARY_KEY
        return ColumnMethod.PRIMARY_KEY
    if is_computed:
        if is_optional:
            return ColumnMethod.OPTIONAL_COMPUTED_COLUMN
        return ColumnMethod.COMPUTED_COLUMN
    if is_optional:
        if has_default:
            return ColumnMethod.OPTIONAL_COLUMN_WITH_DEFAULT_VALUE
        return ColumnMethod.OPTIONAL_COLUMN
    if has_default:
        return ColumnMethod.COLUMN_WITH_DEFAULT_VALUE
    return ColumnMethod.COLUMN


def is_primary_key_autogenerated(col: Column, options: Optional[GeneratorOptions] = None) -> bool:
    """A truthy default expression, else the shared primary-key policy (default False)."""
    if col.default:
        return True
    if options is not None and options.common.primary_key.is_auto_generated is not None:
        return options.common.primary_key.is_auto_generated
    return False


__all__: List[str] = [
    "FieldResolver",
    "UNKNOWN_TS_TYPE",
    "find_primary_key",
    "classify_column_method",
    "is_primary_key_autogenerated",
]
