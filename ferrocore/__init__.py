"""ferrocore: a lazy sequence pipeline with an explicit Option type."""

from ferrocore.errors import FerrocoreError, NonNumericElementError, UnwrapError
from ferrocore.lazy import Iter
from ferrocore.option import NOTHING, Option, Some

__all__ = [
    "Iter",
    "Option",
    "Some",
    "NOTHING",
    "FerrocoreError",
    "NonNumericElementError",
    "UnwrapError",
]

__version__ = "0.1.0"
