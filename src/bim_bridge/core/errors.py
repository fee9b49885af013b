"""Diagnostic records produced while building the command catalog."""

from dataclasses import dataclass
from typing import Literal

DiagnosticKind = Literal["signature_mismatch", "binding_failure", "module_error"]


@dataclass
class CatalogDiagnostic:
    """A candidate (or whole module) skipped during the catalog build"""

    kind: DiagnosticKind
    module: str
    member: str | None = None
    message: str = ""

    # Shape info for signature mismatches
    expected: str | None = None
    actual: str | None = None

    @property
    def location(self) -> str:
        """``module.member`` or just the module for module-level problems"""
        if self.member:
            return f"{self.module}.{self.member}"
        return self.module

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "kind": self.kind,
            "module": self.module,
            "member": self.member,
            "message": self.message,
            "expected": self.expected,
            "actual": self.actual,
        }
