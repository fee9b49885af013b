"""Handler contract for BIM Bridge commands.

Every command is a plain function ``(HostContext, ParameterDocument) -> str``
carrying a ``CommandDeclaration`` attached with the ``@command`` decorator:

    @command("createWall", "createWallByPoints", category="Wall")
    def create_wall(context: HostContext, params: ParameterDocument) -> str:
        ...
"""

from dataclasses import dataclass
from typing import Any, Callable

DECLARATION_ATTR = "__bridge_command__"


class HostContext:
    """Opaque reference to the host application session.

    The catalog and dispatcher never look inside it; hosts subclass it to
    carry whatever their handlers need.
    """


ParameterDocument = dict[str, Any]

Handler = Callable[[HostContext, ParameterDocument], str]


@dataclass(frozen=True)
class CommandDeclaration:
    """Declarative metadata attached to a handler function."""
    name: str
    aliases: tuple[str, ...] = ()
    category: str | None = None
    description: str | None = None


def command(name: str, *aliases: str, category: str | None = None,
            description: str | None = None) -> Callable[[Handler], Handler]:
    """Mark a function as an externally invokable command.

    Args:
        name: Primary command name (case-insensitive at dispatch time)
        aliases: Additional names that route to the same function
        category: Category for discovery; inferred from the module name if omitted
        description: Short description; defaults to ``<module>.<function>``

    Raises:
        ValueError: If name is empty or the function is already declared
    """
    if not isinstance(name, str) or not name:
        raise ValueError("command name is required")

    declaration = CommandDeclaration(
        name=name,
        aliases=tuple(aliases),
        category=category,
        description=description,
    )

    def decorator(func: Handler) -> Handler:
        existing = get_declaration(func)
        if existing is not None:
            raise ValueError(
                f"{getattr(func, '__name__', func)!s} is already declared as "
                f"command '{existing.name}'"
            )
        setattr(func, DECLARATION_ATTR, declaration)
        return func

    return decorator


def get_declaration(obj: Any) -> CommandDeclaration | None:
    """Return the command declaration carried by obj, if any"""
    declaration = getattr(obj, DECLARATION_ATTR, None)
    if isinstance(declaration, CommandDeclaration):
        return declaration
    return None
