"""Core simulation engine."""

from .bitstore import BitStore
from .random_source import RandomSource
from .shapes import GLIDER, Shape, ShapeLibrary, Transformation, random_transformation, transform
from .simulation import Simulation
from .universe import Universe

__all__ = [
    "BitStore",
    "RandomSource",
    "GLIDER",
    "Shape",
    "ShapeLibrary",
    "Transformation",
    "random_transformation",
    "transform",
    "Simulation",
    "Universe",
]
