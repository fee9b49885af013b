"""
Registry Test Suite

Tests for core/registry.py:
- Registry lookup, read-only views, and key invariants
- list_commands() / categories() enumeration
"""

import pytest

from bim_bridge.core.catalog import build_catalog
from bim_bridge.core.contract import HostContext, ParameterDocument, command
from bim_bridge.core.registry import CommandDescriptor, Registry, list_commands, registry_key

from helpers import make_module


def descriptor(name, category="Wall", aliases=()):
    return CommandDescriptor(
        primary_name=name,
        category=category,
        description=f"WallMethods.{name}",
        declaring_module="WallMethods",
        member_name=name,
        aliases=tuple(aliases),
    )


def handler(ctx, params):
    return "{}"


@pytest.fixture
def registry():
    """Registry with one aliased wall command and one sheet command"""
    wall = descriptor("getWallInfo", aliases=["wallInfo"])
    sheet = descriptor("createSheet", category="Sheet")
    return Registry(
        bindings={"getwallinfo": handler, "wallinfo": handler, "createsheet": handler},
        descriptors={"getwallinfo": wall, "wallinfo": wall, "createsheet": sheet},
    )


class TestRegistryKey:
    """Test registry_key()"""

    def test_case_folding(self):
        assert registry_key("getWallInfo") == "getwallinfo"
        assert registry_key("GETWALLINFO") == registry_key("getwallinfo")


class TestLookup:
    """Test Registry.lookup()"""

    def test_any_casing(self, registry):
        for name in ("getWallInfo", "GETWALLINFO", "getwallinfo"):
            found, desc = registry.lookup(name)
            assert found is handler
            assert desc.primary_name == "getWallInfo"

    def test_alias(self, registry):
        assert registry.lookup("WallInfo")[1].primary_name == "getWallInfo"

    def test_missing(self, registry):
        assert registry.lookup("deleteEverything") is None

    def test_contains(self, registry):
        assert "CREATESHEET" in registry
        assert "nope" not in registry
        assert 42 not in registry

    def test_len_and_keys(self, registry):
        assert len(registry) == 3
        assert sorted(registry.keys()) == ["createsheet", "getwallinfo", "wallinfo"]


class TestInvariants:
    """Key-set invariant and immutability"""

    def test_mismatched_keys_rejected(self):
        with pytest.raises(ValueError):
            Registry(bindings={"a": handler}, descriptors={})

    def test_views_are_read_only(self, registry):
        with pytest.raises(TypeError):
            registry.bindings["new"] = handler
        with pytest.raises(TypeError):
            registry.descriptors["new"] = descriptor("new")

    def test_source_dicts_copied(self):
        bindings = {"a": handler}
        descriptors = {"a": descriptor("a")}
        built = Registry(bindings, descriptors)

        bindings["b"] = handler
        descriptors["b"] = descriptor("b")
        assert "b" not in built

    def test_conflicts_tuple(self):
        built = Registry({}, {}, ["foo (overwritten by BMethods.foo)"])
        assert built.conflicts == ("foo (overwritten by BMethods.foo)",)


class TestEnumeration:
    """Test list_commands() and categories()"""

    def test_aliases_not_repeated(self, registry):
        names = [d.primary_name for d in list_commands(registry)]
        assert names == ["getWallInfo", "createSheet"]

    def test_categories_sorted(self, registry):
        categories = registry.categories()
        assert list(categories) == ["Sheet", "Wall"]
        assert [d.primary_name for d in categories["Wall"]] == ["getWallInfo"]

    def test_descriptor_to_dict(self):
        data = descriptor("getWallInfo", aliases=["wallInfo"]).to_dict()
        assert data == {
            "name": "getWallInfo",
            "category": "Wall",
            "description": "WallMethods.getWallInfo",
            "declaring_module": "WallMethods",
            "member_name": "getWallInfo",
            "aliases": ["wallInfo"],
        }


class TestOverwrittenNames:
    """Listing after a later module takes over a name"""

    @pytest.fixture
    def registry(self):
        @command("foo", "fooA")
        def first(ctx: HostContext, params: ParameterDocument) -> str:
            return "first"

        @command("foo")
        def second(ctx: HostContext, params: ParameterDocument) -> str:
            return "second"

        built, _ = build_catalog([make_module("AMethods", first), make_module("BMethods", second)])
        return built

    def test_each_name_listed_once(self, registry):
        names = [d.primary_name for d in registry.list_commands()]
        assert names == ["foo", "fooA"]

    def test_listed_names_route_to_listed_command(self, registry):
        for listed in registry.list_commands():
            for name in (listed.primary_name, *listed.aliases):
                assert registry.lookup(name)[1].member_name == listed.member_name

    def test_survivor_listed_under_alias(self, registry):
        foo, survivor = registry.list_commands()
        assert foo.declaring_module == "BMethods"
        assert survivor.declaring_module == "AMethods"
        assert survivor.aliases == ()

    def test_fully_overwritten_command_not_listed(self):
        @command("foo")
        def first(ctx: HostContext, params: ParameterDocument) -> str:
            return "first"

        @command("FOO")
        def second(ctx: HostContext, params: ParameterDocument) -> str:
            return "second"

        built, _ = build_catalog([make_module("AMethods", first), make_module("BMethods", second)])
        listed = built.list_commands()
        assert [d.declaring_module for d in listed] == ["BMethods"]

    def test_overwritten_alias_dropped(self):
        @command("createDuct", "makeDuct")
        def create_duct(ctx: HostContext, params: ParameterDocument) -> str:
            return "duct"

        @command("makeDuct")
        def make_duct(ctx: HostContext, params: ParameterDocument) -> str:
            return "other"

        built, _ = build_catalog([make_module("DuctMethods", create_duct),
                                  make_module("OtherMethods", make_duct)])
        duct, other = built.list_commands()
        assert (duct.primary_name, duct.aliases) == ("createDuct", ())
        assert other.primary_name == "makeDuct"
