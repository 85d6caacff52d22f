"""A growable byte buffer with sequential typed reads and writes."""

from __future__ import annotations

import struct

from plazza.exceptions import OpaqueObjectError

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


class OpaqueObject:
    """Binary buffer: values are appended by ``pack_*`` and read back in order by ``unpack_*``."""

    def __init__(self, data: bytes | bytearray = b"") -> None:
        self._data = bytearray(data)
        self._offset = 0

    @property
    def data(self) -> bytes:
        return bytes(self._data)

    @property
    def empty(self) -> bool:
        return not self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OpaqueObject):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"OpaqueObject({self.to_hex()!r})"

    def _pack(self, fmt: struct.Struct, value: int) -> OpaqueObject:
        try:
            self._data += fmt.pack(value)
        except struct.error as exc:
            raise ValueError(f"Value {value!r} does not fit the packed field") from exc
        return self

    def _unpack(self, fmt: struct.Struct) -> int:
        self.check_read_space(fmt.size)
        (value,) = fmt.unpack_from(self._data, self._offset)
        self._offset += fmt.size
        return value

    def pack_u32(self, value: int) -> OpaqueObject:
        """Append an unsigned 32-bit integer."""
        return self._pack(_U32, value)

    def pack_u64(self, value: int) -> OpaqueObject:
        """Append an unsigned 64-bit integer."""
        return self._pack(_U64, value)

    def pack_bytes(self, value: bytes | bytearray) -> OpaqueObject:
        """Append a length-prefixed byte string."""
        self.pack_u32(len(value))
        self._data += value
        return self

    def unpack_u32(self) -> int:
        """Read the next unsigned 32-bit integer."""
        return self._unpack(_U32)

    def unpack_u64(self) -> int:
        """Read the next unsigned 64-bit integer."""
        return self._unpack(_U64)

    def unpack_bytes(self) -> bytes:
        """Read the next length-prefixed byte string."""
        length = self.unpack_u32()
        self.check_read_space(length)
        value = bytes(self._data[self._offset:self._offset + length])
        self._offset += length
        return value

    def clear(self) -> None:
        """Drop all data and rewind."""
        self._data.clear()
        self._offset = 0

    def reset(self) -> None:
        """Rewind the read position to the start."""
        self._offset = 0

    def to_hex(self) -> str:
        """Return the content as a lower-case hexadecimal string."""
        return self._data.hex()

    @classmethod
    def from_hex(cls, payload: str) -> OpaqueObject:
        """Build an object from a hexadecimal string."""
        if len(payload) % 2 != 0:
            raise OpaqueObjectError("Invalid hex string: length must be even")
        data = bytearray()
        for start in range(0, len(payload), 2):
            pair = payload[start:start + 2]
            try:
                data.append(int(pair, 16))
            except ValueError as exc:
                raise OpaqueObjectError(f"Invalid hex byte: {pair!r}") from exc
        return cls(data)

    def check_read_space(self, nbytes: int) -> None:
        """Raise if fewer than ``nbytes`` bytes remain to be read."""
        if self._offset + nbytes > len(self._data):
            raise OpaqueObjectError(f"Not enough data to unpack {nbytes} bytes")