"""
Growable byte buffer used by the record reader.

A GrowableBuffer tracks its used length separately from its allocated
capacity so that a single buffer can be reset and refilled record after
record without giving its storage back. Growth always rounds the required
capacity up to the next power of two, which keeps the amortized cost of
many small appends (one per wrapped sequence line) linear.
"""

from typing import Optional, Union


def next_power_of_two(n: int) -> int:
    """
    Round n up to the nearest power of two.

    Args:
        n: Required size (must be >= 1)

    Returns:
        Smallest power of two that is >= n

    Example:
        >>> next_power_of_two(5)
        8
        >>> next_power_of_two(16)
        16
    """
    if n < 1:
        raise ValueError(f"Size must be positive, got {n}")
    return 1 << (n - 1).bit_length()


class GrowableBuffer:
    """
    Byte buffer with separate length and capacity.

    Capacity is always at least length + 1 once storage exists, so a
    terminator byte can be written after the used span without another
    allocation.

    Attributes:
        length: Number of used bytes
        capacity: Number of allocated bytes
    """

    def __init__(self, data: Optional[bytes] = None):
        self._storage = bytearray()
        self.length = 0
        if data:
            self.append(data)

    @property
    def capacity(self) -> int:
        return len(self._storage)

    def ensure_capacity(self, n: int) -> None:
        """
        Guarantee room for n bytes plus a terminator.

        Existing content is preserved. When the buffer has to grow, the
        new capacity is the next power of two >= n + 1.

        Args:
            n: Number of content bytes that must fit
        """
        if n < 0:
            raise ValueError(f"Capacity must be non-negative, got {n}")
        required = n + 1
        if required <= self.capacity:
            return
        self._storage.extend(bytes(next_power_of_two(required) - self.capacity))

    def reset(self) -> None:
        """Mark the buffer empty while keeping its storage for reuse."""
        self.length = 0

    def release(self) -> None:
        """Drop the storage entirely."""
        self._storage = bytearray()
        self.length = 0

    def append(self, data: Union[bytes, bytearray, memoryview]) -> None:
        """Append a span of bytes, growing if needed."""
        size = len(data)
        if not size:
            return
        end = self.length + size
        self.ensure_capacity(end)
        self._storage[self.length:end] = data
        self.length = end

    def append_byte(self, value: int) -> None:
        """Append a single byte value."""
        self.ensure_capacity(self.length + 1)
        self._storage[self.length] = value
        self.length += 1

    def truncate(self, length: int) -> None:
        """Shorten the used span to length bytes."""
        if not 0 <= length <= self.length:
            raise ValueError(f"Cannot truncate {self.length} bytes to {length}")
        self.length = length

    def terminate(self) -> None:
        """Write a NUL byte just past the used span."""
        self.ensure_capacity(self.length)
        self._storage[self.length] = 0

    def last_byte(self) -> Optional[int]:
        return self._storage[self.length - 1] if self.length else None

    @property
    def value(self) -> bytes:
        """The used span as immutable bytes."""
        return bytes(self._storage[:self.length])

    def decode(self, encoding: str = "utf-8", errors: str = "replace") -> str:
        return self._storage[:self.length].decode(encoding, errors)

    def __len__(self) -> int:
        return self.length

    def __bytes__(self) -> bytes:
        return self.value

    def __eq__(self, other) -> bool:
        if isinstance(other, GrowableBuffer):
            return self.value == other.value
        if isinstance(other, (bytes, bytearray)):
            return self.value == bytes(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"GrowableBuffer({self.value!r}, capacity={self.capacity})"
