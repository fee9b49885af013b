"""Catalog builder: discovers ``@command`` handlers and assembles the Registry.

Runs once at startup. All introspection (signature checks, type hint
resolution) happens here, so dispatching a request is a single dict lookup.
"""

import importlib
import inspect
import logging
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Iterable

from bim_bridge.core.contract import (
    CommandDeclaration,
    Handler,
    HostContext,
    get_declaration,
)
from bim_bridge.core.errors import CatalogDiagnostic
from bim_bridge.core.registry import CommandDescriptor, Registry, registry_key

logger = logging.getLogger(__name__)

CATEGORY_SUFFIXES = ("_methods", "Methods")

EXPECTED_SHAPE = "(HostContext, ParameterDocument) -> str"

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass
class BuildReport:
    """Counters and diagnostics from one catalog build"""
    total_registered: int = 0
    total_aliases: int = 0
    conflicts: list[str] = field(default_factory=list)
    modules_scanned: int = 0
    skipped: list[CatalogDiagnostic] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_registered": self.total_registered,
            "total_aliases": self.total_aliases,
            "conflicts": list(self.conflicts),
            "modules_scanned": self.modules_scanned,
            "skipped": [d.to_dict() for d in self.skipped],
        }


class _SkipCandidate(Exception):
    """Internal signal carrying the diagnostic for a rejected candidate"""

    def __init__(self, diagnostic: CatalogDiagnostic):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


def short_module_name(module_name: str) -> str:
    """Last dotted component of a module name"""
    return module_name.rsplit(".", 1)[-1]


def infer_category(module_name: str) -> str:
    """Infer a category from a module name (e.g. ``wall_methods`` -> ``wall``)"""
    name = short_module_name(module_name)
    for suffix in CATEGORY_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def build_catalog(modules: Iterable[ModuleType | str]) -> tuple[Registry, BuildReport]:
    """Scan handler modules and build the command registry.

    Args:
        modules: Module objects or dotted module names, in enumeration order.
            Later registrations of the same key overwrite earlier ones.

    Returns:
        ``(registry, report)``. Problems with individual modules or candidates
        are recorded in ``report.skipped`` and never raised.
    """
    bindings: dict[str, Handler] = {}
    descriptors: dict[str, CommandDescriptor] = {}
    report = BuildReport()

    for entry in modules:
        module = _resolve_module(entry, report)
        if module is None:
            continue
        report.modules_scanned += 1

        for member_name, obj, declaration in _iter_candidates(module):
            try:
                handler = _bind(module, member_name, obj)
            except _SkipCandidate as skip:
                report.skipped.append(skip.diagnostic)
                continue

            descriptor = _describe(module, member_name, declaration)

            _register(bindings, descriptors, report, declaration.name,
                      handler, descriptor)
            report.total_registered += 1

            for alias in descriptor.aliases:
                _register(bindings, descriptors, report, alias,
                          handler, descriptor)
                report.total_aliases += 1

    if report.modules_scanned == 0:
        logger.warning("No handler modules available; command catalog is empty")

    logger.info(
        "Discovered %d commands + %d aliases from %d modules",
        report.total_registered, report.total_aliases, report.modules_scanned,
    )
    if report.conflicts:
        logger.warning(
            "%d name conflicts (last wins): %s",
            len(report.conflicts), ", ".join(report.conflicts),
        )

    return Registry(bindings, descriptors, report.conflicts), report


def _resolve_module(entry: Any, report: BuildReport) -> ModuleType | None:
    """Turn a module-set entry into a module object, or record why not"""
    if isinstance(entry, ModuleType):
        return entry

    if isinstance(entry, str):
        try:
            return importlib.import_module(entry)
        except Exception as e:
            logger.error("Failed to import handler module %s", entry, exc_info=e)
            report.skipped.append(CatalogDiagnostic(
                kind="module_error",
                module=entry,
                message=f"import failed: {type(e).__name__}: {e}",
            ))
            return None

    label = getattr(entry, "__name__", repr(entry))
    logger.warning("Skipping %s: handler entries must be modules", label)
    report.skipped.append(CatalogDiagnostic(
        kind="module_error",
        module=str(label),
        message=f"not a module ({type(entry).__name__})",
    ))
    return None


def _iter_candidates(module: ModuleType):
    """Yield ``(name, obj, declaration)`` for declared members defined in module"""
    for member_name, obj in list(vars(module).items()):
        declaration = get_declaration(obj)
        if declaration is None:
            continue
        # Re-exported handlers belong to the module that defines them
        if getattr(obj, "__module__", None) != module.__name__:
            continue
        yield member_name, obj, declaration


def _bind(module: ModuleType, member_name: str, obj: Any) -> Handler:
    """Validate a candidate against the handler contract and return its binding"""
    module_name = short_module_name(module.__name__)

    if not inspect.isfunction(obj):
        diagnostic = CatalogDiagnostic(
            kind="signature_mismatch",
            module=module_name,
            member=member_name,
            message=f"not a function ({type(obj).__name__})",
            expected=EXPECTED_SHAPE,
            actual=type(obj).__name__,
        )
        logger.warning("%s: %s", diagnostic.location, diagnostic.message)
        raise _SkipCandidate(diagnostic)

    try:
        signature = inspect.signature(obj)
        hints = typing.get_type_hints(obj)
    except Exception as e:
        logger.error("Failed to bind %s.%s", module_name, member_name, exc_info=e)
        raise _SkipCandidate(CatalogDiagnostic(
            kind="binding_failure",
            module=module_name,
            member=member_name,
            message=f"{type(e).__name__}: {e}",
        )) from e

    problem = _signature_problem(signature, hints)
    if problem:
        diagnostic = CatalogDiagnostic(
            kind="signature_mismatch",
            module=module_name,
            member=member_name,
            message=problem,
            expected=EXPECTED_SHAPE,
            actual=str(signature),
        )
        logger.warning(
            "%s: wrong signature %s (expected %s): %s",
            diagnostic.location, diagnostic.actual, EXPECTED_SHAPE, problem,
        )
        raise _SkipCandidate(diagnostic)

    return obj


def _signature_problem(signature: inspect.Signature, hints: dict) -> str | None:
    """Describe how a signature breaks the handler contract, or None if it fits"""
    params = list(signature.parameters.values())
    if len(params) != 2:
        return f"expected 2 parameters, got {len(params)}"

    for param in params:
        if param.kind not in _POSITIONAL:
            return f"parameter '{param.name}' must be positional"

    context_type = hints.get(params[0].name)
    if context_type is not None and not _is_context_type(context_type):
        return f"first parameter must be HostContext, got {_type_name(context_type)}"

    params_type = hints.get(params[1].name)
    if params_type is not None and not _is_document_type(params_type):
        return f"second parameter must be ParameterDocument, got {_type_name(params_type)}"

    if "return" in hints and hints["return"] is not str:
        return f"return type must be str, got {_type_name(hints['return'])}"

    return None


def _is_context_type(annotation: Any) -> bool:
    return (isinstance(annotation, type) and typing.get_origin(annotation) is None
            and issubclass(annotation, HostContext))


def _is_document_type(annotation: Any) -> bool:
    origin = typing.get_origin(annotation) or annotation
    return origin is dict or origin is Mapping


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type) and typing.get_origin(annotation) is None:
        return annotation.__name__
    return repr(annotation)


def _describe(module: ModuleType, member_name: str,
              declaration: CommandDeclaration) -> CommandDescriptor:
    module_name = short_module_name(module.__name__)
    return CommandDescriptor(
        primary_name=declaration.name,
        category=declaration.category or infer_category(module.__name__),
        description=declaration.description or f"{module_name}.{member_name}",
        declaring_module=module_name,
        member_name=member_name,
        aliases=tuple(
            alias for alias in declaration.aliases
            if isinstance(alias, str) and alias.strip()
        ),
    )


def _register(bindings: dict[str, Handler], descriptors: dict[str, CommandDescriptor],
              report: BuildReport, name: str, handler: Handler,
              descriptor: CommandDescriptor) -> None:
    """Insert one key; an existing key is overwritten and recorded as a conflict"""
    key = registry_key(name)
    if key in bindings:
        report.conflicts.append(
            f"{key} (overwritten by {descriptor.declaring_module}.{descriptor.member_name})"
        )
    bindings[key] = handler
    descriptors[key] = descriptor
