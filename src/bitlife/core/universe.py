"""Toroidal Game of Life universe over bit-dense cell storage."""

from typing import Iterable, Tuple
import logging
import numpy as np
import torch
import torch.nn.functional as F

from .bitstore import BitStore
from .shapes import GLIDER, Shape, Transformation, random_transformation

logger = logging.getLogger(__name__)


class Universe:
    """A fixed-size wrapping grid of cells running Conway's rules.

    Cell ``(x, y)`` is bit ``y * width + x`` of the backing :class:`BitStore`.
    Coordinates outside ``[0, width) x [0, height)`` wrap around both axes.

    The universe owns its store exclusively. :meth:`tick` swaps in a new
    store, so any view obtained from :meth:`cell_buffer` must be consumed
    before the next mutating call.
    """

    def __init__(self, width: int, height: int, cells: BitStore) -> None:
        """Initialize a universe around an existing store.

        Args:
            width: Number of columns
            height: Number of rows
            cells: Store holding at least ``width * height`` bits

        Raises:
            ValueError: If a dimension is not positive or the store is too small
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Universe dimensions must be positive, got {width}x{height}")
        if cells.byte_length() * 8 < width * height:
            raise ValueError(
                f"Store of {cells.byte_length()} bytes cannot hold a {width}x{height} universe"
            )

        self._width = width
        self._height = height
        self._cells = cells

        # Single-threaded to keep ticks deterministic and cheap on small grids
        torch.set_num_threads(1)
        self._torch_kernel = self._build_kernel(width, height)

    @classmethod
    def empty(cls, width: int, height: int) -> "Universe":
        """Create a universe with every cell dead."""
        universe = cls(width, height, BitStore.empty(width * height))
        logger.debug("Created empty %dx%d universe", width, height)
        return universe

    @classmethod
    def random(cls, width: int, height: int, source=None) -> "Universe":
        """Create a universe seeded from random bytes.

        Every cell is alive with probability close to one half.

        Args:
            width: Number of columns
            height: Number of rows
            source: Uniform random source, defaults to the shared one
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Universe dimensions must be positive, got {width}x{height}")
        universe = cls(width, height, BitStore.random(width * height, source))
        logger.debug("Created random %dx%d universe with %d live cells", width, height, universe.population)
        return universe

    @staticmethod
    def _build_kernel(width: int, height: int) -> torch.Tensor:
        """Build the 3x3 neighbor kernel matching :meth:`live_neighbor_count`.

        On an axis of size 1 the backward offset collapses onto 0, so its
        pairs are skipped along with the centre.
        """
        xs = (-1 if width > 1 else 0, 0, 1)
        ys = (-1 if height > 1 else 0, 0, 1)
        kernel = torch.zeros(3, 3, dtype=torch.float32)
        for dy in ys:
            for dx in xs:
                if dx == 0 and dy == 0:
                    continue
                kernel[dy + 1, dx + 1] += 1
        return kernel.unsqueeze(0).unsqueeze(0)

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """Dimensions as (width, height)."""
        return (self._width, self._height)

    @property
    def cells(self) -> BitStore:
        """The backing store."""
        return self._cells

    @property
    def population(self) -> int:
        """Number of living cells."""
        return self._cells.count(self._width * self._height)

    def index(self, x: int, y: int) -> int:
        """Get the bit index of the cell at (x, y), wrapping both axes."""
        return (y % self._height) * self._width + (x % self._width)

    def get_cell(self, x: int, y: int) -> bool:
        """Get whether the cell at (x, y) is alive."""
        return self._cells.get(self.index(x, y))

    def live_neighbor_count(self, x: int, y: int) -> int:
        """Count living cells in the Moore neighborhood of (x, y).

        Offsets are ``height - 1, 0, 1`` and ``width - 1, 0, 1``, which wrap
        to the previous row and column. On a 1-wide or 1-high grid a cell
        counts itself along that axis.

        Returns:
            Number of living neighbors (0-8)
        """
        count = 0
        for dy in (self._height - 1, 0, 1):
            for dx in (self._width - 1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                count += self._cells.get(self.index(x + dx, y + dy))
        return count

    def cells_array(self) -> np.ndarray:
        """Copy the cell states into a (height, width) bool array."""
        return self._cells.bits(self._width * self._height).reshape(self._height, self._width)

    def neighbor_counts(self) -> np.ndarray:
        """Count neighbors for every cell using a circular torch convolution.

        Returns:
            (height, width) int8 array, equal cell by cell to
            :meth:`live_neighbor_count`
        """
        grid = torch.from_numpy(self.cells_array().astype(np.float32))
        padded = F.pad(grid.reshape(1, 1, self._height, self._width), (1, 1, 1, 1), mode="circular")
        neighbors = F.conv2d(padded, self._torch_kernel)
        return neighbors[0, 0].numpy().astype(np.int8)

    def tick(self) -> None:
        """Advance the universe by one generation.

        The next generation is written into a clone of the current store,
        which then replaces it, so every cell sees its neighbors' current
        state and no half-updated grid is ever observable.
        """
        alive = self.cells_array()
        neighbors = self.neighbor_counts()

        # Birth on exactly 3; survival on 2 or 3
        next_alive = (neighbors == 3) | (alive & (neighbors == 2))

        next_cells = self._cells.clone()
        next_cells.assign_bits(next_alive.ravel())
        self._cells = next_cells

    def clear(self) -> None:
        """Kill every cell without replacing the store."""
        self._cells.clear()

    def set_cell(self, x: int, y: int, alive: bool) -> None:
        """Set the cell at (x, y), wrapping both axes."""
        self._cells.set(self.index(x, y), alive)

    def place(self, coordinates: Iterable[Tuple[int, int]], x_offset: int = 0, y_offset: int = 0) -> None:
        """Bring cells to life at the given offset.

        Never kills a cell; placing over a live cell leaves it alive.

        Args:
            coordinates: Relative (x, y) cells
            x_offset: Added to every x before wrapping
            y_offset: Added to every y before wrapping
        """
        for x, y in coordinates:
            self._cells.set(self.index(x + x_offset, y + y_offset), True)

    def place_shape(
        self,
        shape: Shape,
        x: int,
        y: int,
        transformation: Transformation = Transformation.IDENTITY,
    ) -> None:
        """Place ``shape`` with its bounding box origin at (x, y).

        Args:
            shape: Shape to stamp
            x: Column of the box origin
            y: Row of the box origin
            transformation: Orientation applied inside the box first
        """
        logger.debug("Placing %s (%s) at (%d, %d)", shape.name, transformation.value, x, y)
        self.place(shape.transformed(transformation), x, y)

    def toggle(self, x: int, y: int) -> bool:
        """Flip the cell at (x, y).

        Returns:
            New state of the cell
        """
        idx = self.index(x, y)
        new_state = not self._cells.get(idx)
        self._cells.set(idx, new_state)
        return new_state

    def spawn_shape_at(self, x: int, y: int, source=None) -> Transformation:
        """Place a randomly oriented glider centred on (x, y).

        Args:
            x: Column of the centre cell
            y: Row of the centre cell
            source: Uniform random source for the orientation

        Returns:
            The transformation that was applied
        """
        transformation = random_transformation(source)
        self.place_shape(GLIDER, x - 1, y - 1, transformation)
        return transformation

    def cell_buffer(self) -> memoryview:
        """Borrow a read-only view of the packed cells.

        Bit ``y * width + x``, least significant bit first in each byte, is
        the state of (x, y). The view is only meaningful until the next
        mutating call.
        """
        return self._cells.raw_view()

    def cell_buffer_pointer(self) -> int:
        """Get the address of the packed cell buffer."""
        return self._cells.raw_pointer()

    def cell_buffer_length(self) -> int:
        """Get the size of the packed cell buffer in bytes."""
        return self._cells.byte_length()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Universe):
            return False
        return self.shape == other.shape and self._cells == other._cells

    def __str__(self) -> str:
        """Render living cells as 'X' and dead ones as '-', one line per row."""
        rows = []
        for row in self.cells_array():
            rows.append("".join("X" if alive else "-" for alive in row) + "\n")
        return "".join(rows)

    def __repr__(self) -> str:
        return f"Universe({self._width}, {self._height}, population={self.population})"
