"""Predefined shapes and the geometric transformations applied before placement."""

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .random_source import default_source

Coordinate = Tuple[int, int]


class Transformation(Enum):
    """Orientation applied to a shape inside its bounding box."""

    IDENTITY = "identity"
    ROTATE_LEFT = "rotate-left"
    ROTATE_RIGHT = "rotate-right"
    REFLECT = "reflect"


def transform(coordinate: Coordinate, box_width: int, box_height: int, transformation: Transformation) -> Coordinate:
    """Map a coordinate inside a ``box_width`` x ``box_height`` box.

    Args:
        coordinate: (x, y) relative to the box origin
        box_width: Width of the bounding box
        box_height: Height of the bounding box
        transformation: Transformation to apply

    Returns:
        The transformed (x, y)
    """
    x, y = coordinate
    if transformation is Transformation.IDENTITY:
        return (x, y)
    if transformation is Transformation.ROTATE_RIGHT:
        return (box_height - y - 1, x)
    if transformation is Transformation.ROTATE_LEFT:
        return (y, box_width - x - 1)
    if transformation is Transformation.REFLECT:
        return (box_width - x - 1, box_height - y - 1)
    raise ValueError(f"Unknown transformation: {transformation!r}")


def random_transformation(source=None) -> Transformation:
    """Pick one of the four transformations with equal probability.

    One uniform draw from [0, 1) is split into quartiles, in the order
    identity, rotate-left, rotate-right, reflect.

    Args:
        source: Object with a ``random()`` method, defaults to the shared source
    """
    if source is None:
        source = default_source()
    value = source.random()
    if value < 0.25:
        return Transformation.IDENTITY
    if value < 0.5:
        return Transformation.ROTATE_LEFT
    if value < 0.75:
        return Transformation.ROTATE_RIGHT
    return Transformation.REFLECT


class Shape:
    """An immutable set of live cells inside a known bounding box."""

    def __init__(
        self,
        name: str,
        cells: List[Coordinate],
        width: int,
        height: int,
        description: str = "",
    ) -> None:
        """Initialize a shape.

        Args:
            name: Shape name
            cells: (x, y) offsets of the live cells, relative to the box origin
            width: Bounding box width
            height: Bounding box height
            description: Optional description

        Raises:
            ValueError: If a cell falls outside the bounding box
        """
        for x, y in cells:
            if not (0 <= x < width and 0 <= y < height):
                raise ValueError(f"Cell ({x}, {y}) of '{name}' outside its {width}x{height} box")

        self._name = name
        self._cells = tuple((int(x), int(y)) for x, y in cells)
        self._width = width
        self._height = height
        self._description = description

    @property
    def name(self) -> str:
        return self._name

    @property
    def cells(self) -> Tuple[Coordinate, ...]:
        return self._cells

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def description(self) -> str:
        return self._description

    @property
    def size(self) -> Tuple[int, int]:
        """Bounding box as (width, height)."""
        return (self._width, self._height)

    def bounding_box(self, transformation: Transformation = Transformation.IDENTITY) -> Tuple[int, int]:
        """Get (width, height) of the box after ``transformation``.

        Rotations swap the axes; identity and reflection keep them.
        """
        if transformation in (Transformation.ROTATE_LEFT, Transformation.ROTATE_RIGHT):
            return (self._height, self._width)
        return (self._width, self._height)

    def transformed(self, transformation: Transformation = Transformation.IDENTITY) -> Iterator[Coordinate]:
        """Yield every cell mapped through ``transformation``.

        The shape itself is left untouched.
        """
        for cell in self._cells:
            yield transform(cell, self._width, self._height, transformation)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._cells)

    def __repr__(self) -> str:
        return f"Shape({self._name!r}, {list(self._cells)!r}, {self._width}, {self._height})"


GLIDER = Shape(
    "Glider",
    [(0, 0), (1, 0), (0, 1), (2, 1), (0, 2)],
    3,
    3,
    "Five-cell spaceship travelling diagonally",
)


class ShapeLibrary:
    """Fixed catalog of named shapes."""

    def __init__(self) -> None:
        self._shapes: Dict[str, Shape] = {}
        self._load_builtin_shapes()

    def _load_builtin_shapes(self) -> None:
        """Load the built-in catalog."""
        # Still lifes
        self.add_shape(Shape("Block", [(0, 0), (1, 0), (0, 1), (1, 1)], 2, 2, "2x2 still life"))
        self.add_shape(
            Shape(
                "Beehive",
                [(1, 0), (2, 0), (0, 1), (3, 1), (1, 2), (2, 2)],
                4,
                3,
                "Six-cell still life",
            )
        )

        # Oscillators
        self.add_shape(Shape("Blinker", [(0, 1), (1, 1), (2, 1)], 3, 3, "Period-2 oscillator"))
        self.add_shape(
            Shape(
                "Toad",
                [(1, 0), (2, 0), (3, 0), (0, 1), (1, 1), (2, 1)],
                4,
                2,
                "Period-2 oscillator",
            )
        )

        # Spaceships
        self.add_shape(GLIDER)
        self.add_shape(
            Shape(
                "Lightweight Spaceship",
                [(0, 0), (3, 0), (4, 1), (0, 2), (4, 2), (1, 3), (2, 3), (3, 3), (4, 3)],
                5,
                4,
                "LWSS - period-4 spaceship",
            )
        )

        # Methuselahs
        self.add_shape(
            Shape(
                "R-pentomino",
                [(1, 0), (2, 0), (0, 1), (1, 1), (1, 2)],
                3,
                3,
                "Methuselah that stabilizes after 1103 generations",
            )
        )

    def add_shape(self, shape: Shape) -> None:
        """Add a shape to the catalog, replacing any shape of the same name."""
        self._shapes[shape.name] = shape

    def get_shape(self, name: str) -> Shape:
        """Get a shape by name, ignoring case.

        Raises:
            KeyError: If no shape has that name
        """
        shape = self.find_shape(name)
        if shape is None:
            raise KeyError(f"Unknown shape '{name}'")
        return shape

    def find_shape(self, name: str) -> Optional[Shape]:
        """Get a shape by name, ignoring case, or None."""
        if name in self._shapes:
            return self._shapes[name]
        lowered = name.lower()
        for shape_name, shape in self._shapes.items():
            if shape_name.lower() == lowered:
                return shape
        return None

    def list_shapes(self) -> List[str]:
        """Get the catalog names in insertion order."""
        return list(self._shapes.keys())

    def __contains__(self, name: str) -> bool:
        return self.find_shape(name) is not None
