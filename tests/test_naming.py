"""
tests/test_naming.py
Unit tests for mappergen.naming.NamingTransformer.
"""

from __future__ import annotations

import pytest

from mappergen.models import NamingOptions, Table, TableKind, TableMappingOptions
from mappergen.naming import NamingTransformer


@pytest.fixture()
def naming() -> NamingTransformer:
    return NamingTransformer()


class TestDefaults:
    def test_class_names(self, naming: NamingTransformer) -> None:
        assert naming.class_name("public.order_items", TableKind.TABLE) == "OrderItemsTable"
        assert naming.class_name("public.order_items", TableKind.VIEW) == "OrderItemsView"

    def test_instance_names(self, naming: NamingTransformer) -> None:
        assert naming.instance_name("public.order_items", TableKind.TABLE) == "tOrderItems"
        assert naming.instance_name("public.order_items", TableKind.VIEW) == "vOrderItems"

    def test_columns_object_without_prefix_is_camel(self, naming: NamingTransformer) -> None:
        assert naming.columns_object_name("order_items", TableKind.TABLE) == "orderItemsCols"

    def test_row_type_names_for_table(self, naming: NamingTransformer) -> None:
        assert naming.row_type_names("orders", TableKind.TABLE) == {
            "selected": "OrdersRow",
            "insertable": "InsertableOrdersRow",
            "updatable": "UpdatableOrdersRow",
        }

    def test_view_has_only_selected_types(self, naming: NamingTransformer) -> None:
        assert naming.row_type_names("order_totals", TableKind.VIEW) == {
            "selected": "OrderTotalsRow",
        }
        assert naming.values_type_names("order_totals", TableKind.VIEW) == {
            "selected": "OrderTotals",
        }

    def test_values_type_names(self, naming: NamingTransformer) -> None:
        names = naming.values_type_names("orders", TableKind.TABLE)
        assert names["insertable"] == "InsertableOrders"
        assert names["updatable"] == "UpdatableOrders"

    def test_output_file_name(self, naming: NamingTransformer) -> None:
        assert naming.output_file_name("public.orders", TableKind.TABLE) == "OrdersTable.ts"


class TestCustomNaming:
    def test_prefix_and_suffix(self) -> None:
        naming = NamingTransformer(
            NamingOptions(table_class_name_prefix="Db", table_class_name_suffix="")
        )
        assert naming.class_name("users", TableKind.TABLE) == "DbUsers"

    def test_columns_object_with_prefix_is_pascal(self) -> None:
        naming = NamingTransformer(NamingOptions.model_validate({"tableColumnsNamePrefix": "all"}))
        assert naming.columns_object_name("order_items", TableKind.TABLE) == "allOrderItemsCols"


class TestIdPrefix:
    def _table(self, name: str) -> Table:
        return Table(name=name, type="BASE TABLE")

    def test_none_by_default(self) -> None:
        assert NamingTransformer.id_prefix(self._table("public.users"), TableMappingOptions()) is None

    def test_explicit_prefix(self) -> None:
        mapping = TableMappingOptions(id_prefix="Shop")
        assert NamingTransformer.id_prefix(self._table("public.users"), mapping) == "Shop"

    def test_qualified_names(self) -> None:
        mapping = TableMappingOptions(use_qualified_table_name=True)
        assert NamingTransformer.id_prefix(self._table("app.public.users"), mapping) == "AppPublic"
