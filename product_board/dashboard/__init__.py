"""Client-side product list with optimistic updates."""

from .engine import ReconciliationEngine
from .mutations import AddProduct, Mutation, RemoveProduct, ReplaceProduct, ResetTo, SetStatus
from .reducer import apply_mutation, dedupe, derive_speculative
from .registry import OperationRegistry

__all__ = [
    "ReconciliationEngine",
    "OperationRegistry",
    "Mutation",
    "SetStatus",
    "AddProduct",
    "ReplaceProduct",
    "RemoveProduct",
    "ResetTo",
    "apply_mutation",
    "dedupe",
    "derive_speculative",
]
