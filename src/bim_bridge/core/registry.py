"""Command registry: name to handler bindings plus discovery metadata.

A Registry is assembled once by ``build_catalog`` and never mutated afterwards,
so any number of threads can read it without locking.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterator, Mapping

from bim_bridge.core.contract import Handler


def registry_key(name: str) -> str:
    """Case-folded lookup key for a command name or alias"""
    return name.casefold()


@dataclass(frozen=True)
class CommandDescriptor:
    """Metadata about a discovered command"""
    primary_name: str
    category: str
    description: str
    declaring_module: str
    member_name: str
    aliases: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "name": self.primary_name,
            "category": self.category,
            "description": self.description,
            "declaring_module": self.declaring_module,
            "member_name": self.member_name,
            "aliases": list(self.aliases),
        }


class Registry:
    """Frozen mapping of registry keys to handlers and descriptors."""

    def __init__(self, bindings: Mapping[str, Handler],
                 descriptors: Mapping[str, CommandDescriptor],
                 conflicts: list[str] | tuple[str, ...] = ()):
        if set(bindings) != set(descriptors):
            raise ValueError("bindings and descriptors must share the same keys")
        self._bindings = MappingProxyType(dict(bindings))
        self._descriptors = MappingProxyType(dict(descriptors))
        self._conflicts = tuple(conflicts)

    @property
    def bindings(self) -> Mapping[str, Handler]:
        return self._bindings

    @property
    def descriptors(self) -> Mapping[str, CommandDescriptor]:
        return self._descriptors

    @property
    def conflicts(self) -> tuple[str, ...]:
        return self._conflicts

    def lookup(self, name: str) -> tuple[Handler, CommandDescriptor] | None:
        """Resolve a command name or alias in any casing.

        Returns:
            ``(handler, descriptor)``, or None if the name is not registered
        """
        key = registry_key(name)
        handler = self._bindings.get(key)
        if handler is None:
            return None
        return handler, self._descriptors[key]

    def keys(self) -> list[str]:
        return list(self._bindings.keys())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and registry_key(name) in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def list_commands(self) -> list[CommandDescriptor]:
        """Each reachable command once, in first registration order.

        A command is listed under its primary name while that name still
        routes to it. A command whose primary name was overwritten but which
        keeps an alias is listed under its first surviving alias. Aliases
        that now route elsewhere are dropped from the listed descriptor.
        Every listed name therefore resolves to the listed command.
        """
        seen: set[int] = set()
        commands = []
        for descriptor in self._descriptors.values():
            if id(descriptor) in seen:
                continue
            seen.add(id(descriptor))

            names = [descriptor.primary_name, *descriptor.aliases]
            reachable = [n for n in names if self._descriptors.get(registry_key(n)) is descriptor]
            if not reachable:
                continue
            if reachable == names:
                commands.append(descriptor)
            else:
                commands.append(replace(
                    descriptor,
                    primary_name=reachable[0],
                    aliases=tuple(reachable[1:]),
                ))
        return commands

    def categories(self) -> dict[str, list[CommandDescriptor]]:
        """Group distinct descriptors by category, categories sorted by name"""
        grouped: dict[str, list[CommandDescriptor]] = {}
        for descriptor in self.list_commands():
            grouped.setdefault(descriptor.category, []).append(descriptor)
        return dict(sorted(grouped.items(), key=lambda item: item[0].casefold()))


def list_commands(registry: Registry) -> list[CommandDescriptor]:
    """List every command available in the registry"""
    return registry.list_commands()
