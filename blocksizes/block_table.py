import bisect
import msgpack
from blocksizes.config import PTR_SIZE, BITS_PER_BYTE, MIN_CAPACITY
from blocksizes.config import PTR_SIZE_KEY, MIN_SHIFT_KEY, BLOCK_SHIFTS_KEY


class InvalidConfiguration(ValueError):
    """Raised when a pointer width or minimum capacity cannot produce a block table"""


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


class BlockTable:
    """
    Power-of-two block sizes that together cover an address space.

    The first two blocks are both min_capacity, every following block doubles
    the previous one, and the last block is half of the address space:

        [min, min, 2*min, 4*min, ..., max_capacity // 2]

    so the start of block i (i >= 1) is min_capacity * 2**(i-1) and the sizes
    sum to exactly max_capacity.

    :param ptr_size: int        #Bytes per pointer
    :param min_capacity: int    #Smallest block size in bytes, a power of two
    """
    def __init__(self, ptr_size=PTR_SIZE, min_capacity=MIN_CAPACITY):
        if not _is_int(ptr_size) or ptr_size <= 0:
            raise InvalidConfiguration(f"Pointer size must be a positive integer, got {ptr_size!r}")
        if not _is_int(min_capacity) or min_capacity <= 0:
            raise InvalidConfiguration(f"Minimum capacity must be a positive integer, got {min_capacity!r}")
        if min_capacity & (min_capacity - 1):
            raise InvalidConfiguration(f"Minimum capacity must be a power of two, got {min_capacity}")

        self.ptr_size = ptr_size                                    # bytes per pointer
        self.min_capacity = min_capacity                            # size of the two smallest blocks
        self.max_capacity = 1 << (ptr_size * BITS_PER_BYTE)         # size of the whole address space
        if min_capacity >= self.max_capacity:
            raise InvalidConfiguration(
                f"Minimum capacity {min_capacity} must be smaller than the address space ({self.max_capacity} bytes)")

        self._min_shift = min_capacity.bit_length() - 1             # log2(min_capacity)
        self.block_sizes = tuple(self._generate())                  # (min, min, 2*min, ..., max/2)
        self._positions = self._start_positions()                   # start address of each block
        self._ends = [start + size for start, size in zip(self._positions, self.block_sizes)]

    def __repr__(self):
        return f"ptr_size: {self.ptr_size}  |  min_capacity: {self.min_capacity}  |  blocks: {self.length()}"

    def _generate(self):
        size = self.min_capacity
        block_sizes = [size, size]
        while size < self.max_capacity // 2:
            size *= 2
            block_sizes.append(size)
        return block_sizes

    def _start_positions(self):
        positions = []
        position = 0
        for size in self.block_sizes:
            positions.append(position)
            position += size
        return positions

    def length(self):  # Number of blocks
        return len(self.block_sizes)

    def total_size(self):  # Sum of all block sizes
        return sum(self.block_sizes)

    def covers_address_space(self):  # Blocks add up to the whole address space
        return self.total_size() == self.max_capacity

    def block_positions(self):  # Start address of every block
        return list(self._positions)

    def locate(self, position):
        """
        Translate an address into the block holding it
        Args:
            position (int): address in [0, max_capacity)
        Returns:
            tuple: (block_index, offset within that block)
        """
        if not _is_int(position) or not 0 <= position < self.max_capacity:
            raise IndexError(f"Position {position!r} is outside the address space of {self.max_capacity} bytes")

        # Block i >= 1 covers [min * 2**(i-1), min * 2**i), so the index is the
        # bit length of the position measured in units of min_capacity
        block_index = (position >> self._min_shift).bit_length()
        return block_index, position - self._positions[block_index]

    def blocks_for_capacity(self, capacity):
        """
        Number of leading blocks needed to hold `capacity` bytes
        Args:
            capacity (int): bytes required, at most max_capacity
        Returns:
            int: smallest n with sum(block_sizes[:n]) >= capacity
        """
        if not _is_int(capacity) or capacity < 0:
            raise ValueError(f"Capacity must be a non-negative integer, got {capacity!r}")
        if capacity > self.max_capacity:
            raise ValueError(f"Capacity {capacity} exceeds the address space of {self.max_capacity} bytes")
        if capacity == 0:
            return 0
        return bisect.bisect_left(self._ends, capacity) + 1

    def _block_shifts(self):  # log2 of every block size
        return [size.bit_length() - 1 for size in self.block_sizes]

    def serialize(self):
        """
        Serialize the table into bytes
        Returns:
            bytes: msgpack payload holding the pointer size, and the minimum and block sizes as log2 shifts
        """
        # Sizes are stored as shifts since msgpack integers stop at 64 bits
        table_data = {
            PTR_SIZE_KEY: self.ptr_size,
            MIN_SHIFT_KEY: self._min_shift,
            BLOCK_SHIFTS_KEY: self._block_shifts()
        }
        return msgpack.packb(table_data)

    @classmethod
    def deserialize(cls, data):
        """
        Deserialize bytes into a BlockTable
        Args:
            data (bytes): payload produced by serialize()
        Returns:
            BlockTable: rebuilt table
        """
        table_data = msgpack.unpackb(data)
        try:
            ptr_size = table_data[PTR_SIZE_KEY]
            min_shift = table_data[MIN_SHIFT_KEY]
            block_shifts = table_data[BLOCK_SHIFTS_KEY]
        except (KeyError, TypeError) as e:
            raise InvalidConfiguration(f"Serialized table is missing field {e}") from e

        # Bound the shift before building 1 << min_shift
        if not _is_int(min_shift) or min_shift < 0:
            raise InvalidConfiguration(f"Minimum shift must be a non-negative integer, got {min_shift!r}")
        if _is_int(ptr_size) and min_shift >= ptr_size * BITS_PER_BYTE:
            raise InvalidConfiguration(f"Minimum shift {min_shift} does not fit a {ptr_size} byte pointer")
        table = cls(ptr_size, 1 << min_shift)

        # The stored shifts have to match what the configuration generates
        if not isinstance(block_shifts, (list, tuple)) or list(block_shifts) != table._block_shifts():
            raise InvalidConfiguration(
                f"Serialized block sizes do not match a table with ptr_size={table.ptr_size}, min_capacity={table.min_capacity}")
        return table
