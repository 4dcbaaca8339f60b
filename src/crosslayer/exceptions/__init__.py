"""Exception hierarchy for crosslayer."""

from .base import CrossLayerError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    UnknownRepositoryError,
)
from .input import (
    InputError,
    MalformedInputError,
    MalformedTimestampError,
    UnresolvedReferenceError,
)
from .service import ServiceError

__all__ = [
    "CrossLayerError",
    "InputError",
    "MalformedInputError",
    "MalformedTimestampError",
    "UnresolvedReferenceError",
    "ServiceError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
    "UnknownRepositoryError",
]
