"""BIM Bridge - string-named command catalog and dispatch for host modeling applications."""

__version__ = "0.2.0"

from bim_bridge.core import (
    BuildReport,
    CommandDescriptor,
    Dispatcher,
    HostContext,
    Registry,
    build_catalog,
    command,
    dispatch,
    list_commands,
)

__all__ = [
    "BuildReport",
    "CommandDescriptor",
    "Dispatcher",
    "HostContext",
    "Registry",
    "build_catalog",
    "command",
    "dispatch",
    "list_commands",
]
