"""Name-based dispatch over a built Registry.

Callers never need to guard against exceptions: unknown names and failing
handlers both come back as ``{"success": false, "error": "..."}``.
"""

import logging

from bim_bridge.core import responses
from bim_bridge.core.contract import HostContext, ParameterDocument
from bim_bridge.core.registry import CommandDescriptor, Registry

logger = logging.getLogger(__name__)


def dispatch(registry: Registry, name: str, context: HostContext,
             parameters: ParameterDocument | None,
             include_traceback: bool = True) -> str:
    """Invoke the command registered under name (any casing, any alias).

    A handler's string result is returned unmodified. Anything a handler
    raises, ``SystemExit`` included, becomes a failure envelope. Only
    ``KeyboardInterrupt`` propagates.
    """
    entry = registry.lookup(name) if isinstance(name, str) else None
    if entry is None:
        logger.debug("Unknown command requested: %r", name)
        return responses.failure(f"Unknown command: {name}")

    handler, descriptor = entry
    try:
        result = handler(context, parameters if parameters is not None else {})
    except KeyboardInterrupt:
        raise
    except BaseException as e:
        logger.exception(
            "Command %s (%s.%s) raised",
            descriptor.primary_name, descriptor.declaring_module, descriptor.member_name,
        )
        return responses.from_exception(e, include_traceback=include_traceback)

    if not isinstance(result, str):
        logger.error(
            "Command %s returned %s instead of str",
            descriptor.primary_name, type(result).__name__,
        )
        return responses.failure(
            f"Command {descriptor.primary_name} returned {type(result).__name__}, expected str",
            error_type="TypeError",
        )

    return result


class Dispatcher:
    """Serves dispatch requests against one frozen registry"""

    def __init__(self, registry: Registry, include_traceback: bool = True):
        self._registry = registry
        self.include_traceback = include_traceback

    @property
    def registry(self) -> Registry:
        return self._registry

    def invoke(self, name: str, context: HostContext,
               parameters: ParameterDocument | None = None) -> str:
        return dispatch(self._registry, name, context, parameters,
                        include_traceback=self.include_traceback)

    def list_commands(self) -> list[CommandDescriptor]:
        return self._registry.list_commands()
