"""Command discovery, registry, and dispatch."""

from bim_bridge.core.contract import (
    CommandDeclaration,
    Handler,
    HostContext,
    ParameterDocument,
    command,
    get_declaration,
)
from bim_bridge.core.errors import CatalogDiagnostic
from bim_bridge.core.registry import CommandDescriptor, Registry, list_commands, registry_key
from bim_bridge.core.catalog import BuildReport, build_catalog, infer_category
from bim_bridge.core.dispatcher import Dispatcher, dispatch

__all__ = [
    "CommandDeclaration",
    "Handler",
    "HostContext",
    "ParameterDocument",
    "command",
    "get_declaration",
    "CatalogDiagnostic",
    "CommandDescriptor",
    "Registry",
    "list_commands",
    "registry_key",
    "BuildReport",
    "build_catalog",
    "infer_category",
    "Dispatcher",
    "dispatch",
]
