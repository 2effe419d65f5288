# File: mappergen/__main__.py
"""
mappergen — Module entry point.

Allows running the generator directly via::

    python -m mappergen --config mappergen.yaml
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from mappergen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
