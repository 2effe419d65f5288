"""
tests/test_imports.py
Unit tests for mappergen.imports.ImportResolver.
"""

from __future__ import annotations

import pathlib
from typing import Optional

import pytest

from mappergen.errors import AdapterImportPathError
from mappergen.imports import ImportResolver
from mappergen.models import (
    ColumnMethod,
    DbType,
    FieldTmplInput,
    GeneratedFieldType,
    ImportedItem,
)


def _field(
    name: str,
    ts_type: Optional[ImportedItem] = None,
    adapter: Optional[ImportedItem] = None,
) -> FieldTmplInput:
    return FieldTmplInput(
        name=name,
        column_method=ColumnMethod.COLUMN,
        column_name=name,
        is_optional=False,
        has_default=False,
        field_type=GeneratedFieldType(
            db_type=DbType(name="custom"),
            ts_type=ts_type or ImportedItem(name="unknown"),
            adapter=adapter,
        ),
    )


@pytest.fixture()
def out_file(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "out" / "OrdersTable.ts"


class TestTypeImports:
    def test_same_directory_is_dot_slash(self, tmp_path: pathlib.Path, out_file: pathlib.Path) -> None:
        money = ImportedItem(name="Money", import_path=str(tmp_path / "out" / "money.ts"))
        imports = ImportResolver().type_imports(out_file, [_field("total", money)])
        assert len(imports) == 1
        assert imports[0].import_path == "./money.ts"
        assert imports[0].imported == ["Money"]
        assert imports[0].is_default is False

    def test_sibling_directory(self, tmp_path: pathlib.Path, out_file: pathlib.Path) -> None:
        money = ImportedItem(name="Money", import_path=str(tmp_path / "lib" / "money.ts"))
        imports = ImportResolver().type_imports(out_file, [_field("total", money)])
        assert imports[0].import_path == "../lib/money.ts"

    def test_non_relative_path_is_verbatim(self, out_file: pathlib.Path) -> None:
        decimal = ImportedItem(name="Decimal", import_path="decimal.js", is_relative=False)
        imports = ImportResolver().type_imports(out_file, [_field("total", decimal)])
        assert imports[0].import_path == "decimal.js"

    def test_same_name_imported_once(self, tmp_path: pathlib.Path, out_file: pathlib.Path) -> None:
        path = str(tmp_path / "lib" / "money.ts")
        fields = [
            _field("total", ImportedItem(name="Money", import_path=path)),
            _field("tax", ImportedItem(name="Money", import_path=path)),
        ]
        imports = ImportResolver().type_imports(out_file, fields)
        assert [i.imported for i in imports] == [["Money"]]

    def test_names_merge_per_path_in_first_seen_order(
        self, tmp_path: pathlib.Path, out_file: pathlib.Path
    ) -> None:
        path = str(tmp_path / "lib" / "types.ts")
        fields = [
            _field("a", ImportedItem(name="Money", import_path=path)),
            _field("b", ImportedItem(name="Point", import_path=path)),
            _field("c", ImportedItem(name="Money", import_path=path)),
        ]
        imports = ImportResolver().type_imports(out_file, fields)
        assert len(imports) == 1
        assert imports[0].imported == ["Money", "Point"]

    def test_named_before_default(self, tmp_path: pathlib.Path, out_file: pathlib.Path) -> None:
        fields = [
            _field("a", ImportedItem(name="Big", import_path="big.js", is_default=True, is_relative=False)),
            _field("b", ImportedItem(name="Money", import_path=str(tmp_path / "money.ts"))),
        ]
        imports = ImportResolver().type_imports(out_file, fields)
        assert [(i.imported, i.is_default) for i in imports] == [
            (["Money"], False),
            (["Big"], True),
        ]

    def test_items_without_path_are_skipped(self, out_file: pathlib.Path) -> None:
        fields = [_field("a", ImportedItem(name="string")), _field("b")]
        assert ImportResolver().type_imports(out_file, fields) == []


class TestAdapterImports:
    def test_shared_non_relative_path_merges(self, out_file: pathlib.Path) -> None:
        fields = [
            _field("a", adapter=ImportedItem(name="MoneyAdapter", import_path="@app/adapters", is_relative=False)),
            _field("b", adapter=ImportedItem(name="DateAdapter", import_path="@app/adapters", is_relative=False)),
        ]
        imports = ImportResolver().adapter_imports(out_file, fields)
        assert len(imports) == 1
        assert imports[0].import_path == "@app/adapters"
        assert imports[0].imported == ["MoneyAdapter", "DateAdapter"]

    def test_default_adapter_path(self, tmp_path: pathlib.Path, out_file: pathlib.Path) -> None:
        resolver = ImportResolver(str(tmp_path / "src" / "adapters.ts"))
        fields = [_field("a", adapter=ImportedItem(name="MoneyAdapter"))]
        imports = resolver.adapter_imports(out_file, fields)
        assert imports[0].import_path == "../src/adapters.ts"

    def test_own_path_beats_default(self, tmp_path: pathlib.Path, out_file: pathlib.Path) -> None:
        resolver = ImportResolver(str(tmp_path / "src" / "adapters.ts"))
        fields = [
            _field("a", adapter=ImportedItem(name="A", import_path=str(tmp_path / "out" / "a.ts")))
        ]
        assert resolver.adapter_imports(out_file, fields)[0].import_path == "./a.ts"

    def test_missing_path_raises(self, out_file: pathlib.Path) -> None:
        adapter = ImportedItem(name="MoneyAdapter")
        with pytest.raises(AdapterImportPathError) as exc_info:
            ImportResolver().adapter_imports(out_file, [_field("a", adapter=adapter)])
        assert exc_info.value.adapter is adapter
        assert "MoneyAdapter" in str(exc_info.value)

    def test_nameless_adapter_raises(self, out_file: pathlib.Path) -> None:
        with pytest.raises(ValueError):
            ImportResolver("adapters").adapter_imports(out_file, [_field("a", adapter=ImportedItem())])


class TestResolve:
    def test_adapters_come_before_types(self, out_file: pathlib.Path) -> None:
        fields = [
            _field(
                "a",
                ts_type=ImportedItem(name="Money", import_path="@app/money", is_relative=False),
                adapter=ImportedItem(name="MoneyAdapter", import_path="@app/adapters", is_relative=False),
            )
        ]
        imports = ImportResolver().resolve(out_file, fields)
        assert [i.import_path for i in imports] == ["@app/adapters", "@app/money"]

    def test_connection_source(self, tmp_path: pathlib.Path, out_file: pathlib.Path) -> None:
        resolver = ImportResolver()
        assert (
            resolver.connection_source_import_path(out_file, str(tmp_path / "out" / "db.ts"))
            == "./db.ts"
        )
        assert (
            resolver.connection_source_import_path(out_file, str(tmp_path / "db" / "connection.ts"))
            == "../db/connection.ts"
        )
