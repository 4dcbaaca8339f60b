"""
crosslayer - cross-source change attribution and MVC layer statistics

Links version-control changesets to the tracker defects and stories that
describe them, then measures how features and issues spread across the
model, view and controller layers.
"""

__version__ = "0.1.0"

from .config import PipelineConfig, load_config
from .layers import LayerStats, aggregate, rules_for
from .linkage import Commit, consolidate

__all__ = [
    "Commit",
    "LayerStats",
    "PipelineConfig",
    "aggregate",
    "consolidate",
    "load_config",
    "rules_for",
]
