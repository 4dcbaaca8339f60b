"""Per-project rules classifying a file path into an architectural layer.

Every rule set is an immutable value with a ``classify(path) -> str``
method returning a Layer value or "" for unclassified paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Protocol

from ..exceptions import UnknownRepositoryError
from .models import Layer

M = Layer.MODEL.value
V = Layer.VIEW.value
C = Layer.CONTROLLER.value


class LayerRules(Protocol):
    def classify(self, path: str) -> str: ...


@dataclass(frozen=True)
class SegmentTableRules:
    """Look one path segment up in a table; anything else is unclassified."""

    table: Mapping[str, str]
    segment: int = 1  # paths start with "/", so segment 0 is empty

    def classify(self, path: str) -> str:
        parts = path.split("/")
        if len(parts) <= self.segment:
            return ""
        return self.table.get(parts[self.segment], "")


@dataclass(frozen=True)
class AnchoredDirectoryRules:
    """Top-level component directories whose third segment names the tier.

    Shallow paths and anything outside the anchors count as controller.
    """

    anchors: frozenset[str]
    model_dirs: frozenset[str]
    view_dirs: frozenset[str]
    default: str = C

    def classify(self, path: str) -> str:
        parts = path.split("/")
        if len(parts) < 3 or parts[0] not in self.anchors:
            return self.default
        if parts[2] in self.model_dirs:
            return M
        if parts[2] in self.view_dirs:
            return V
        return self.default


@dataclass(frozen=True)
class PrefixRules:
    """Model by path prefix, view by top-level directory, controller otherwise."""

    model_prefixes: tuple[str, ...]
    view_roots: frozenset[str] = field(default_factory=frozenset)
    default: str = C

    def classify(self, path: str) -> str:
        if path.startswith(self.model_prefixes):
            return M
        if path.split("/", 1)[0] in self.view_roots:
            return V
        return self.default


SIOP_RULES = SegmentTableRules(table={"siop-jpa": M, "siop-ejb": C, "siop-war": V})

OFBIZ_RULES = AnchoredDirectoryRules(
    anchors=frozenset({"applications", "specialpurpose", "framework"}),
    model_dirs=frozenset({"data", "entitydef", "entityext", "datafile"}),
    view_dirs=frozenset({"config", "webapp", "widget", "webtools"}),
)

OPENMRS_RULES = PrefixRules(
    model_prefixes=("api/src/main/java/org/openmrs", "api/src/main/resources"),
    view_roots=frozenset({"web", "webapp"}),
)

RULE_SETS: dict[str, LayerRules] = {
    "siop": SIOP_RULES,
    "ofbiz": OFBIZ_RULES,
    "openmrs": OPENMRS_RULES,
}


def rules_for(repository: str) -> LayerRules:
    try:
        return RULE_SETS[repository]
    except KeyError:
        raise UnknownRepositoryError(repository, RULE_SETS)
