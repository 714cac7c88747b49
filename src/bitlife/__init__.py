"""Conway's Game of Life on a bit-packed toroidal universe."""

__version__ = "0.1.0"

from .core.bitstore import BitStore
from .core.random_source import RandomSource
from .core.shapes import GLIDER, Shape, ShapeLibrary, Transformation, random_transformation, transform
from .core.simulation import Simulation
from .core.universe import Universe

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
