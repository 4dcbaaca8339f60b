"""Architectural layers and layer-combination labels."""

from enum import Enum
from typing import Iterable


class Layer(str, Enum):
    """MVC tiers. Unclassified paths map to the empty string, not a member."""

    MODEL = "m"
    VIEW = "v"
    CONTROLLER = "c"


# Label order: "mvc", "mv", "mc", "vc", "m", "v", "c"
_ORDER = (Layer.MODEL, Layer.VIEW, Layer.CONTROLLER)


def combination(layers: Iterable[str]) -> str:
    """Encode a set of layers as a combination label ("" when empty).

    Insertion order and repetition do not matter.
    """
    present = {getattr(layer, "value", layer) for layer in layers}
    return "".join(layer.value for layer in _ORDER if layer.value in present)
