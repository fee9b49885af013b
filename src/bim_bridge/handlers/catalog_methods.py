"""Catalog commands: discovery and introspection of registered commands."""

from bim_bridge.core import responses
from bim_bridge.core.contract import ParameterDocument, command
from bim_bridge.core.registry import registry_key
from bim_bridge.generators.catalog_yaml_gen import CatalogYAMLGenerator
from bim_bridge.session import BridgeSession


def suggest_names(name: str, keys: list[str], limit: int = 5) -> list[str]:
    """Close registry keys for a mistyped name.

    Exact case-insensitive matches come first, then prefix matches, then
    substring matches.
    """
    wanted = registry_key(name)
    if not wanted:
        return []

    exact = [k for k in keys if k == wanted]
    prefix = [k for k in keys if k != wanted and k.startswith(wanted)]
    substring = [k for k in keys if wanted in k and k not in exact and k not in prefix]
    return (exact + sorted(prefix) + sorted(substring))[:limit]


@command("getMethods", "listMethods", category="Catalog",
         description="Get available commands, optionally filtered by category")
def get_methods(session: BridgeSession, params: ParameterDocument) -> str:
    try:
        category = params.get("category")
        methods = session.registry.list_commands()
        if category:
            methods = [m for m in methods if m.category.casefold() == str(category).casefold()]

        return responses.success({
            "count": len(methods),
            "methods": [m.to_dict() for m in methods],
        })
    except Exception as e:
        return responses.from_exception(e)


@command("getMethodCategories", category="Catalog",
         description="Get command categories with command counts")
def get_method_categories(session: BridgeSession, params: ParameterDocument) -> str:
    try:
        categories = session.registry.categories()
        return responses.success({
            "count": len(categories),
            "categories": {name: len(commands) for name, commands in categories.items()},
        })
    except Exception as e:
        return responses.from_exception(e)


@command("describeMethod", category="Catalog",
         description="Describe one command by name or alias")
def describe_method(session: BridgeSession, params: ParameterDocument) -> str:
    name = params.get("name")
    if not name or not isinstance(name, str):
        return responses.failure("name is required")

    try:
        entry = session.registry.lookup(name)
        if entry is None:
            return responses.failure(
                f"Unknown command: {name}",
                suggestions=suggest_names(name, session.registry.keys()),
            )

        _, descriptor = entry
        return responses.success({
            **descriptor.to_dict(),
            "resolved_from": name,
        })
    except Exception as e:
        return responses.from_exception(e)


@command("exportCatalog", category="Catalog",
         description="Export the command catalog as YAML or JSON text")
def export_catalog(session: BridgeSession, params: ParameterDocument) -> str:
    output_format = str(params.get("format", "yaml")).lower()
    if output_format not in ("yaml", "json"):
        return responses.failure(
            f"Unsupported format: {output_format}",
            valid_options=["yaml", "json"],
        )

    try:
        generator = CatalogYAMLGenerator(session.registry)
        category = params.get("category")
        if output_format == "json":
            content = generator.generate_json()
        elif category:
            content = generator.generate_category(str(category))
        else:
            content = generator.generate()

        return responses.success({"format": output_format, "content": content})
    except Exception as e:
        return responses.from_exception(e)
