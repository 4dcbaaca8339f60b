"""Layer classification and per-feature / per-issue aggregation."""

from .aggregate import AggregationFilters, EntityAggregate, LayerAggregator, LayerStats, aggregate
from .models import Layer, combination
from .report import format_report, stats_to_dict
from .rules import (
    OFBIZ_RULES,
    OPENMRS_RULES,
    RULE_SETS,
    SIOP_RULES,
    AnchoredDirectoryRules,
    LayerRules,
    PrefixRules,
    SegmentTableRules,
    rules_for,
)

__all__ = [
    "AggregationFilters",
    "AnchoredDirectoryRules",
    "EntityAggregate",
    "Layer",
    "LayerAggregator",
    "LayerRules",
    "LayerStats",
    "OFBIZ_RULES",
    "OPENMRS_RULES",
    "PrefixRules",
    "RULE_SETS",
    "SIOP_RULES",
    "SegmentTableRules",
    "aggregate",
    "combination",
    "format_report",
    "rules_for",
    "stats_to_dict",
]
