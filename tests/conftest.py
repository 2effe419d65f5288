"""
tests/conftest.py
Shared fixtures for the mappergen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import json
import logging
import pathlib
from typing import Any, Dict, List

import pytest
import yaml

from mappergen.models import Column, Constraint, GeneratorOptions, Table, TblsSchema


# ---------------------------------------------------------------------------
# Raw schema data fixtures
# ---------------------------------------------------------------------------

_SHOP_SCHEMA: Dict[str, Any] = {
    "name": "shop",
    "tables": [
        {
            "name": "public.orders",
            "type": "BASE TABLE",
            "comment": "Customer orders",
            "columns": [
                {
                    "name": "id",
                    "type": "integer",
                    "nullable": False,
                    "default": "nextval('orders_id_seq'::regclass)",
                },
                {"name": "total", "type": "numeric", "nullable": False},
                {"name": "note", "type": "text", "nullable": True, "comment": "Free text"},
                {"name": "created_at", "type": "timestamp with time zone",
                 "nullable": False, "default": "now()"},
            ],
            "constraints": [
                {
                    "name": "orders_pkey",
                    "type": "PRIMARY KEY",
                    "def": "PRIMARY KEY (id)",
                    "columns": ["id"],
                },
            ],
            "indexes": [],
        },
        {
            "name": "public.customers",
            "type": "BASE TABLE",
            "columns": [
                {"name": "id", "type": "uuid", "nullable": False},
                {"name": "email", "type": "varchar(255)", "nullable": False},
                {"name": "is_active", "type": "boolean", "nullable": False, "default": "true"},
            ],
            "constraints": [
                {"name": "customers_pkey", "type": "PRIMARY KEY", "columns": ["id"]},
            ],
        },
        {
            "name": "public.order_totals",
            "type": "VIEW",
            "columns": [
                {"name": "customer_id", "type": "uuid", "nullable": True},
                {"name": "sum", "type": "numeric", "nullable": True},
            ],
            "constraints": [],
        },
        {
            "name": "public.order_lines_mv",
            "type": "MATERIALIZED VIEW",
            "columns": [{"name": "x", "type": "integer"}],
        },
    ],
}


@pytest.fixture()
def shop_schema_dict() -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(_SHOP_SCHEMA)


@pytest.fixture()
def shop_schema(shop_schema_dict: Dict[str, Any]) -> TblsSchema:
    return TblsSchema.model_validate(shop_schema_dict)


@pytest.fixture()
def schema_yaml_path(shop_schema_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the schema dict to a temporary YAML file and return its path."""
    path = tmp_path / "schema.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(shop_schema_dict, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def schema_json_path(shop_schema_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(shop_schema_dict), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Options fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "generated"


@pytest.fixture()
def options_dict(schema_yaml_path: pathlib.Path, output_dir: pathlib.Path) -> Dict[str, Any]:
    """Minimal complete options pointing at the temporary schema and output dir."""
    return {
        "schema_path": str(schema_yaml_path),
        "output_dir_path": str(output_dir),
        "connection_source_path": str(schema_yaml_path.parent / "db" / "connection.ts"),
    }


@pytest.fixture()
def options(options_dict: Dict[str, Any]) -> GeneratorOptions:
    return GeneratorOptions.model_validate(options_dict)


@pytest.fixture()
def options_yaml_path(options_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Options file written with camelCase keys, like a hand-written config."""
    camel: Dict[str, Any] = {
        "schemaPath": options_dict["schema_path"],
        "outputDirPath": options_dict["output_dir_path"],
        "connectionSourcePath": options_dict["connection_source_path"],
        "export": {"rowTypes": True},
    }
    path = tmp_path / "mappergen.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(camel, fh, default_flow_style=False)
    return path


# ---------------------------------------------------------------------------
# Model builders
# ---------------------------------------------------------------------------


def make_table(
    name: str = "public.users",
    columns: List[Dict[str, Any]] | None = None,
    constraints: List[Dict[str, Any]] | None = None,
    type: str = "BASE TABLE",
) -> Table:
    return Table(
        name=name,
        type=type,
        columns=[Column(**c) for c in (columns or [])],
        constraints=[Constraint.model_validate(c) for c in (constraints or [])],
    )


@pytest.fixture()
def table_factory():
    """Expose ``make_table`` to tests as a fixture."""
    return make_table


@pytest.fixture(autouse=True)
def _reset_mappergen_logger():
    """Undo CLI logging setup so caplog keeps seeing mappergen records."""
    yield
    logging.disable(logging.NOTSET)
    root = logging.getLogger("mappergen")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
