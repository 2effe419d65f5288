# File: mappergen/imports.py
"""
mappergen - Import Resolver
=============================

Collects every externally defined type and adapter referenced by the fields
of one table and turns them into a de-duplicated list of import statements,
with module specifiers rewritten relative to the generated file.

Rules:
    - References are grouped by *resolved* path, split into named imports
      and default imports.  A name imported twice from the same module
      appears once.
    - Paths flagged ``is_relative=False`` are external modules and are used
      verbatim; everything else is made relative to the output file's
      directory and always starts with ``./`` or ``../``.
    - Output order: named imports first, then default imports, each in the
      order their path was first seen, names in first-seen order.
    - Adapter imports come before type imports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from mappergen.errors import AdapterImportPathError
from mappergen.models import FieldTmplInput, ImportedItem, ImportTmplInput
from mappergen.utils import relative_module_path

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("mappergen.imports")

PathLike = Union[str, Path]


class _ImportAccumulator:
    """
    Two insertion-ordered ``path → names`` maps, one per import style.

    Dicts with ``None`` values stand in for ordered sets.
    """

    __slots__ = ("_named", "_default")

    def __init__(self) -> None:
        self._named: Dict[str, Dict[str, None]] = {}
        self._default: Dict[str, Dict[str, None]] = {}

    def add(self, import_path: str, name: str, is_default: bool) -> None:
        target: Dict[str, Dict[str, None]] = self._default if is_default else self._named
        target.setdefault(import_path, {})[name] = None

    def to_inputs(self) -> List[ImportTmplInput]:
        inputs: List[ImportTmplInput] = []
        for mapping, is_default in ((self._named, False), (self._default, True)):
            for import_path, names in mapping.items():
                inputs.append(
                    ImportTmplInput(
                        import_path=import_path,
                        imported=list(names),
                        is_default=is_default,
                    )
                )
        return inputs


class ImportResolver:
    """
    Resolves type and adapter imports for one generated module at a time.

    Args:
        default_adapter_import_path: Shared module for adapters that do not
            declare their own ``import_path`` (``common.type_adapter``).
    """

    def __init__(self, default_adapter_import_path: Optional[str] = None) -> None:
        self.default_adapter_import_path: Optional[str] = default_adapter_import_path

    # -----------------------------------------------------------------
    # Path resolution
    # -----------------------------------------------------------------

    def resolve_import_path(
        self,
        output_file_path: PathLike,
        import_path: str,
        item: ImportedItem,
    ) -> str:
        """Module specifier for *import_path* as seen from *output_file_path*."""
        if item.is_relative is False:
            return import_path
        return relative_module_path(output_file_path, import_path)

    def adapter_import_path(self, output_file_path: PathLike, adapter: ImportedItem) -> str:
        """
        Resolved module specifier for an adapter.

        Raises:
            AdapterImportPathError: neither the adapter nor the shared
                configuration supplies an import path.
        """
        declared: Optional[str] = adapter.import_path or self.default_adapter_import_path
        if not declared:
            raise AdapterImportPathError(adapter)
        return self.resolve_import_path(output_file_path, declared, adapter)

    def connection_source_import_path(
        self,
        output_file_path: PathLike,
        connection_source_path: str,
    ) -> str:
        """Relative specifier for the module exporting the DB connection type."""
        return relative_module_path(output_file_path, connection_source_path)

    # -----------------------------------------------------------------
    # Collection
    # -----------------------------------------------------------------

    def adapter_imports(
        self,
        output_file_path: PathLike,
        fields: Sequence[FieldTmplInput],
    ) -> List[ImportTmplInput]:
        acc: _ImportAccumulator = _ImportAccumulator()
        for field in fields:
            adapter: Optional[ImportedItem] = field.field_type.adapter
            if adapter is None:
                continue
            if not adapter.name:
                raise ValueError(
                    f"Adapter for field '{field.name}' has no name to import."
                )
            import_path: str = self.adapter_import_path(output_file_path, adapter)
            acc.add(import_path, adapter.name, adapter.is_default)
        return acc.to_inputs()

    def type_imports(
        self,
        output_file_path: PathLike,
        fields: Sequence[FieldTmplInput],
    ) -> List[ImportTmplInput]:
        acc: _ImportAccumulator = _ImportAccumulator()
        for field in fields:
            ts_type: Optional[ImportedItem] = field.field_type.ts_type
            if ts_type is None or not ts_type.import_path or not ts_type.name:
                continue
            import_path: str = self.resolve_import_path(
                output_file_path, ts_type.import_path, ts_type
            )
            acc.add(import_path, ts_type.name, ts_type.is_default)
        return acc.to_inputs()

    def resolve(
        self,
        output_file_path: PathLike,
        fields: Sequence[FieldTmplInput],
    ) -> List[ImportTmplInput]:
        """Adapter imports followed by type imports."""
        imports: List[ImportTmplInput] = self.adapter_imports(output_file_path, fields)
        imports.extend(self.type_imports(output_file_path, fields))
        logger.debug(
            "Resolved %d import statement(s) for %s.", len(imports), output_file_path
        )
        return imports


__all__: List[str] = ["ImportResolver"]
