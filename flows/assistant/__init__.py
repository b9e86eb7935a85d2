from .schema import INPUT_SHAPE, OUTPUT_SHAPE
from .descriptor import DESCRIPTOR

__all__ = ["INPUT_SHAPE", "OUTPUT_SHAPE", "DESCRIPTOR"]
