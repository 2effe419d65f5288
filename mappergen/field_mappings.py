# File: mappergen/field_mappings.py
"""
mappergen - Built-in Field Mappings
=====================================
Default rules appended after the user's ``field_mappings``.  They map the
common PostgreSQL / MySQL / SQLite column type names onto ts-sql-query
value types.  Anything not covered here needs a user rule, otherwise the
column fails with ``UnresolvedTypeError``.

Rules only ever set ``type``; optionality, defaults and names fall through
to the values derived from the schema document.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from mappergen.models import (
    DbType,
    FieldMapping,
    GeneratedField,
    GeneratedFieldType,
    ImportedItem,
)


def _type_rule(pattern: str, db_type_name: str) -> FieldMapping:
    """Rule mapping every column whose type matches *pattern* to a ts-sql-query type."""
    return FieldMapping(
        column_type=re.compile(pattern, re.IGNORECASE),
        generated_field=GeneratedField(
            type=GeneratedFieldType(db_type=DbType(name=db_type_name)),
        ),
    )


FIELD_MAPPINGS: Tuple[FieldMapping, ...] = (
    _type_rule(r"^(smallint|integer|int|int2|int4|mediumint|tinyint|smallserial|serial|serial4)$", "int"),
    _type_rule(r"^(bigint|int8|bigserial|serial8)$", "bigint"),
    _type_rule(
        r"^(numeric|decimal|real|float|float4|float8|double|double precision|money)(\(.*\))?$",
        "double",
    ),
    _type_rule(r"^(boolean|bool)$", "boolean"),
    _type_rule(
        r"^(text|citext|name|character varying|varchar|character|char|bpchar|"
        r"tinytext|mediumtext|longtext)(\(.*\))?$",
        "string",
    ),
    _type_rule(r"^uuid$", "uuid"),
    _type_rule(r"^date$", "localDate"),
    _type_rule(r"^(time|timetz|time (with|without) time zone)(\(.*\))?$", "localTime"),
    _type_rule(
        r"^(timestamp|timestamptz|datetime|timestamp (with|without) time zone)(\(.*\))?$",
        "localDateTime",
    ),
    FieldMapping(
        column_type=re.compile(r"^jsonb?$", re.IGNORECASE),
        generated_field=GeneratedField(
            type=GeneratedFieldType(
                kind="custom",
                db_type=DbType(name="json"),
                ts_type=ImportedItem(name="unknown"),
            ),
        ),
    ),
)


__all__: List[str] = ["FIELD_MAPPINGS"]
