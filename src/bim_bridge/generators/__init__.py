"""Catalog document generators."""

from bim_bridge.generators.catalog_yaml_gen import CatalogYAMLGenerator

__all__ = ["CatalogYAMLGenerator"]
