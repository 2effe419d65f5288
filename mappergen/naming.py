# File: mappergen/naming.py
"""
mappergen - Naming Transformer
================================
Derives the identifiers of a generated module from the table name.

Only the last dot-segment of a qualified name is used; it is Pascal- or
camel-cased and wrapped with the prefix/suffix pair configured for the
table kind.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from mappergen.models import NamingOptions, Table, TableKind, TableMappingOptions
from mappergen.utils import last_segment, to_camel_case, to_pascal_case


class NamingTransformer:
    """Pure naming functions over a fixed ``NamingOptions``."""

    def __init__(self, naming: Optional[NamingOptions] = None) -> None:
        self.naming: NamingOptions = naming or NamingOptions()

    # -- Base forms ---------------------------------------------------------

    @staticmethod
    def pascal_name(table_name: str) -> str:
        return to_pascal_case(last_segment(table_name))

    @staticmethod
    def camel_name(table_name: str) -> str:
        return to_camel_case(last_segment(table_name))

    # -- Derived identifiers ------------------------------------------------

    def class_name(self, table_name: str, kind: TableKind) -> str:
        n: NamingOptions = self.naming
        if kind == TableKind.TABLE:
            return n.table_class_name_prefix + self.pascal_name(table_name) + n.table_class_name_suffix
        return n.view_class_name_prefix + self.pascal_name(table_name) + n.view_class_name_suffix

    def instance_name(self, table_name: str, kind: TableKind) -> str:
        n: NamingOptions = self.naming
        if kind == TableKind.TABLE:
            return (
                n.table_instance_name_prefix
                + self.pascal_name(table_name)
                + n.table_instance_name_suffix
            )
        return n.view_instance_name_prefix + self.pascal_name(table_name) + n.view_instance_name_suffix

    def columns_object_name(self, table_name: str, kind: TableKind) -> str:
        """
        Name of the extracted column set.

        With a prefix configured the base is PascalCase (``prefix + Users +
        suffix``), without one it is camelCase (``users + suffix``).
        """
        if kind == TableKind.TABLE:
            prefix: str = self.naming.table_columns_name_prefix
            suffix: str = self.naming.table_columns_name_suffix
        else:
            prefix = self.naming.view_columns_name_prefix
            suffix = self.naming.view_columns_name_suffix
        if prefix:
            return prefix + self.pascal_name(table_name) + suffix
        return self.camel_name(table_name) + suffix

    def row_type_names(self, table_name: str, kind: TableKind) -> Dict[str, str]:
        """``selected`` always; ``insertable``/``updatable`` only for tables."""
        n: NamingOptions = self.naming
        base: str = self.pascal_name(table_name)
        names: Dict[str, str] = {
            "selected": n.selected_row_type_name_prefix + base + n.selected_row_type_name_suffix,
        }
        if kind != TableKind.VIEW:
            names["insertable"] = (
                n.insertable_row_type_name_prefix + base + n.insertable_row_type_name_suffix
            )
            names["updatable"] = (
                n.updatable_row_type_name_prefix + base + n.updatable_row_type_name_suffix
            )
        return names

    def values_type_names(self, table_name: str, kind: TableKind) -> Dict[str, str]:
        n: NamingOptions = self.naming
        base: str = self.pascal_name(table_name)
        names: Dict[str, str] = {
            "selected": n.selected_values_type_name_prefix
            + base
            + n.selected_values_type_name_suffix,
        }
        if kind != TableKind.VIEW:
            names["insertable"] = (
                n.insertable_values_type_name_prefix + base + n.insertable_values_type_name_suffix
            )
            names["updatable"] = (
                n.updatable_values_type_name_prefix + base + n.updatable_values_type_name_suffix
            )
        return names

    @staticmethod
    def id_prefix(table: Table, table_mapping: TableMappingOptions) -> Optional[str]:
        """
        Prefix of the ts-sql-query table id.

        An explicit ``id_prefix`` wins; with qualified table names the schema
        segments are PascalCased and joined (``"app.public.users"`` → ``"AppPublic"``).
        """
        if table_mapping.id_prefix:
            return table_mapping.id_prefix
        if table_mapping.use_qualified_table_name:
            return "".join(to_pascal_case(part) for part in table.name.split(".")[:-1])
        return None

    def output_file_name(self, table_name: str, kind: TableKind) -> str:
        return self.class_name(table_name, kind) + ".ts"


__all__: List[str] = ["NamingTransformer"]
