"""Bit-dense cell storage."""

from typing import Optional
import logging
import numpy as np

from .random_source import default_source, draw_bytes

logger = logging.getLogger(__name__)


def _byte_count(bit_count: int) -> int:
    return bit_count // 8 + (1 if bit_count % 8 else 0)


class BitStore:
    """Packed boolean array over a fixed number of bytes.

    Bit ``k`` of byte ``b`` is ``(b >> k) & 1``, so bit ``i`` of the store
    lives in byte ``i // 8`` at position ``i % 8``. The store does not know
    how many of its bits are meaningful; the owner tracks that, and padding
    bits in the last byte carry no state.

    The backing array is allocated once and never resized, which keeps any
    view handed out by :meth:`raw_view` pointing at live data until the owner
    replaces the store.
    """

    def __init__(self, data: np.ndarray) -> None:
        """Wrap an existing byte array.

        Args:
            data: One-dimensional uint8 array, taken over without copying
        """
        if data.dtype != np.uint8 or data.ndim != 1:
            raise ValueError(f"BitStore needs a 1-D uint8 array, got {data.dtype} with {data.ndim} dims")
        self._data = data

    @classmethod
    def empty(cls, bit_count: int) -> "BitStore":
        """Create a store of ``ceil(bit_count / 8)`` zero bytes."""
        return cls(np.zeros(_byte_count(bit_count), dtype=np.uint8))

    @classmethod
    def random(cls, bit_count: int, source=None) -> "BitStore":
        """Create a store of ``ceil(bit_count / 8)`` uniformly random bytes.

        Args:
            bit_count: Minimum number of bits to hold
            source: Uniform random source, defaults to the shared one

        Returns:
            New BitStore; tail bits beyond ``bit_count`` are not cleared
        """
        if source is None:
            source = default_source()
        byte_count = _byte_count(bit_count)
        logger.debug("Seeding %d bytes of random cell data", byte_count)
        return cls(draw_bytes(source, byte_count))

    def _locate(self, index: int):
        byte = index // 8
        if index < 0 or byte >= len(self._data):
            raise IndexError(f"Bit {index} outside store of {len(self._data)} bytes")
        return byte, 1 << (index % 8)

    def get(self, index: int) -> bool:
        """Test whether the bit at ``index`` is set.

        Raises:
            IndexError: If ``index // 8`` is outside the buffer
        """
        byte, mask = self._locate(index)
        return bool(self._data[byte] & mask)

    def set(self, index: int, value: bool) -> None:
        """Set or clear the bit at ``index`` in place.

        Raises:
            IndexError: If ``index // 8`` is outside the buffer
        """
        byte, mask = self._locate(index)
        current = int(self._data[byte])
        self._data[byte] = current | mask if value else current & ~mask & 0xFF

    def byte_length(self) -> int:
        """Get the number of bytes backing the store."""
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def raw_view(self) -> memoryview:
        """Get a read-only, zero-copy view of the backing bytes."""
        view = self._data.view()
        view.flags.writeable = False
        return memoryview(view)

    def raw_pointer(self) -> int:
        """Get the address of the first backing byte."""
        return self._data.__array_interface__["data"][0]

    def clone(self) -> "BitStore":
        """Copy every byte, padding included, into a new store."""
        return BitStore(self._data.copy())

    def bits(self, count: Optional[int] = None) -> np.ndarray:
        """Unpack the first ``count`` bits into a bool array.

        Args:
            count: Number of bits to unpack (all bytes when omitted)

        Returns:
            One-dimensional bool array
        """
        unpacked = np.unpackbits(self._data, bitorder="little")
        if count is not None:
            if count > len(unpacked):
                raise IndexError(f"Cannot read {count} bits from store of {len(self._data)} bytes")
            unpacked = unpacked[:count]
        return unpacked.astype(bool)

    def assign_bits(self, bits: np.ndarray) -> None:
        """Overwrite the leading bits with ``bits``, keeping the padding bits.

        Args:
            bits: One-dimensional bool array no longer than the store capacity
        """
        count = len(bits)
        if count > len(self._data) * 8:
            raise IndexError(f"Cannot write {count} bits into store of {len(self._data)} bytes")

        packed = np.packbits(np.asarray(bits, dtype=bool), bitorder="little")
        full_bytes = count // 8
        self._data[:full_bytes] = packed[:full_bytes]

        remainder = count % 8
        if remainder:
            low_mask = (1 << remainder) - 1
            tail = int(self._data[full_bytes]) & ~low_mask & 0xFF
            self._data[full_bytes] = tail | (int(packed[full_bytes]) & low_mask)

    def count(self, bit_count: Optional[int] = None) -> int:
        """Count set bits among the first ``bit_count`` bits."""
        return int(np.count_nonzero(self.bits(bit_count)))

    def clear(self) -> None:
        """Zero every byte in place."""
        self._data.fill(0)

    def to_bytes(self) -> bytes:
        """Copy the backing buffer out as bytes."""
        return self._data.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitStore):
            return False
        return np.array_equal(self._data, other._data)

    def __repr__(self) -> str:
        return f"BitStore({self._data.tolist()!r})"
