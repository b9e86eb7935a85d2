from .schema import FACTS, INPUT_SHAPE, OUTPUT_SHAPE
from .descriptor import DESCRIPTOR, compute_loan_facts

__all__ = ["FACTS", "INPUT_SHAPE", "OUTPUT_SHAPE", "DESCRIPTOR", "compute_loan_facts"]
