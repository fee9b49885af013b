"""Built-in handler modules for BIM Bridge.

The catalog builder scans these in order; host-specific handler modules are
appended from the ``handler_modules`` config entry.
"""

from bim_bridge.handlers import system_methods
from bim_bridge.handlers import catalog_methods


# Closed set of bundled handler modules, in enumeration order
HANDLER_MODULES = (
    system_methods,
    catalog_methods,
)


def handler_modules(extra: list[str] | None = None) -> list:
    """Bundled handler modules followed by extra dotted module names"""
    return [*HANDLER_MODULES, *(extra or [])]
