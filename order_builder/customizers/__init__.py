"""
Item customizers, one per family with options.
"""

from .appetizer import AppetizerCustomizer
from .base import Customizer
from .chicken import ChickenCustomizer
from .pizza import PizzaCustomizer
from .sandwich import SandwichCustomizer

__all__ = [
    "AppetizerCustomizer",
    "ChickenCustomizer",
    "Customizer",
    "PizzaCustomizer",
    "SandwichCustomizer",
]
