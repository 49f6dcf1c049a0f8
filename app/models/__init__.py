from .weight import WeightEntry

__all__ = [
    "WeightEntry",
]
