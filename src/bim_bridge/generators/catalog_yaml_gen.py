"""Command Catalog to YAML Generator (Human View)"""

import json
from typing import Any

import yaml

from bim_bridge.core.registry import CommandDescriptor, Registry


class CatalogYAMLGenerator:
    """Generates a human-readable catalog of registered commands"""

    def __init__(self, registry: Registry):
        self.registry = registry

    def generate(self) -> str:
        """Generate full YAML view"""
        return yaml.dump(self.to_document(), allow_unicode=True,
                         default_flow_style=False, sort_keys=False)

    def generate_category(self, category: str) -> str:
        """Generate YAML for a single category (matched case-insensitively)"""
        for name, commands in self.registry.categories().items():
            if name.casefold() == category.casefold():
                section = {name: self._transform_commands(commands)}
                return yaml.dump(section, allow_unicode=True,
                                 default_flow_style=False, sort_keys=False)
        return f"# Category '{category}' not found"

    def generate_json(self) -> str:
        """Same document as generate(), as JSON text"""
        return json.dumps(self.to_document(), indent=2, ensure_ascii=False)

    def to_document(self) -> dict[str, Any]:
        categories = self.registry.categories()
        return {
            "summary": {
                "commands": sum(len(c) for c in categories.values()),
                "keys": len(self.registry),
                "categories": len(categories),
            },
            "categories": {
                name: self._transform_commands(commands)
                for name, commands in categories.items()
            },
        }

    def _transform_commands(self, commands: list[CommandDescriptor]) -> dict:
        """Transform descriptors to name -> details, sorted by name"""
        result = {}
        for descriptor in sorted(commands, key=lambda d: d.primary_name.casefold()):
            entry: dict[str, Any] = {"description": descriptor.description}
            if descriptor.aliases:
                entry["aliases"] = list(descriptor.aliases)
            entry["handler"] = f"{descriptor.declaring_module}.{descriptor.member_name}"
            result[descriptor.primary_name] = entry
        return result
