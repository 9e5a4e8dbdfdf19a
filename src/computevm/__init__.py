from .errors import (
    InvalidCombination,
    MissingRequiredField,
    ResolverError,
    UnsupportedCombination,
)
from .resolver import resolve, resolve_shape

__all__ = [
    "InvalidCombination",
    "MissingRequiredField",
    "ResolverError",
    "UnsupportedCombination",
    "resolve",
    "resolve_shape",
]
