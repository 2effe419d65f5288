# File: mappergen/templates.py
"""
mappergen - Template Renderer
===============================
Thin wrapper around a Jinja2 environment that renders one
``TableTmplInput`` into TypeScript source.

The compiled template is loaded lazily and at most once per renderer.  The
first render reads the template file off the event loop; concurrent first
renders wait on the same lock and reuse the single compiled template.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from jinja2 import Environment, FileSystemLoader, Template

from mappergen.models import TableTmplInput
from mappergen.utils import read_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("mappergen.templates")

DEFAULT_TEMPLATE_PATH: Path = Path(__file__).resolve().parent / "table_mapper.ts.j2"


def build_environment(search_path: Path) -> Environment:
    """Jinja2 environment tuned for line-oriented source templates."""
    return Environment(
        loader=FileSystemLoader(str(search_path)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )


class TemplateRenderer:
    """
    Renders table mapper modules from a single template file.

    Args:
        template_path: Custom template; defaults to the bundled
            ``table_mapper.ts.j2``.
    """

    def __init__(self, template_path: Optional[Union[str, Path]] = None) -> None:
        self.template_path: Path = (
            Path(template_path).resolve() if template_path else DEFAULT_TEMPLATE_PATH
        )
        self.environment: Environment = build_environment(self.template_path.parent)
        self._compiled: Optional[Template] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def is_compiled(self) -> bool:
        return self._compiled is not None

    def _loop_lock(self) -> asyncio.Lock:
        # asyncio.Lock binds to the loop it first waits on; one per loop.
        loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def get_compiled_template(self) -> Template:
        """Compiled template, reading and compiling it on first use only."""
        if self._compiled is not None:
            return self._compiled
        async with self._loop_lock():
            if self._compiled is None:
                source: str = await asyncio.to_thread(read_file, self.template_path)
                self._compiled = self.environment.from_string(source)
                logger.debug("Compiled template %s.", self.template_path)
        return self._compiled

    async def render(self, template_input: TableTmplInput) -> str:
        template: Template = await self.get_compiled_template()
        context: Dict[str, Any] = template_input.model_dump(mode="python")
        return template.render(**context)


__all__: List[str] = [
    "DEFAULT_TEMPLATE_PATH",
    "TemplateRenderer",
    "build_environment",
]
