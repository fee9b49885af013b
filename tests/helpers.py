"""Shared helpers for building throwaway handler modules in tests."""

from types import ModuleType


class FakeContext:
    """Stand-in host object; handlers under test never inspect it."""


def make_module(name: str, *funcs) -> ModuleType:
    """Create a module whose namespace holds funcs, as if defined there"""
    module = ModuleType(name)
    for func in funcs:
        func.__module__ = name
        setattr(module, func.__name__, func)
    return module
