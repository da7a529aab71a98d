# -*- coding: utf-8 -*-
"""
Reader for the SIR0 container used by the Pokémon Mystery Dungeon data files.

Layout (little-endian):
    0x00  b"SIR0"
    0x04  u32 pointer to the content header
    0x08  u32 pointer to the pointer offset list
    0x0C  u32 padding

The pointer offset list stores the position of every pointer inside the file.
Each position is written as the distance from the previous one, split into 7 bit
groups (most significant first, high bit set on every group but the last). A
zero byte ends the list.
"""
import struct

from placeholder_errors import ContainerDecodeError

SIR0_MAGIC = b"SIR0"
SIR0_HEADER_SIZE = 16


def decode_pointer_offsets(raw_bytes):
    """Decode the SIR0 pointer offset list.

    Args:
        raw_bytes (bytes): The bytes starting at the pointer offset list.

    Returns:
        list[int]: Absolute positions of every pointer in the file.
    """
    offsets = []
    current_offset = 0
    accumulator = 0
    in_sequence = False
    for byte in raw_bytes:
        if byte == 0 and not in_sequence:
            return offsets
        accumulator = (accumulator << 7) | (byte & 0x7F)
        if byte & 0x80:
            in_sequence = True
        else:
            current_offset += accumulator
            offsets.append(current_offset)
            accumulator = 0
            in_sequence = False
    raise ContainerDecodeError("the pointer offset list is not terminated")


class Sir0:
    """
    An opened SIR0 container.

    The file object stays owned by the caller and must remain open while
    entries are read through `file`.
    """

    def __init__(self, file):
        self.file = file
        file.seek(0)
        header = file.read(SIR0_HEADER_SIZE)
        if len(header) < SIR0_HEADER_SIZE:
            raise ContainerDecodeError(f"the file is only {len(header)} bytes long")
        magic, content_offset, pointer_list_offset, _ = struct.unpack('<4sIII', header)
        if magic != SIR0_MAGIC:
            raise ContainerDecodeError(f"bad magic {magic!r}, expected {SIR0_MAGIC!r}")
        self.content_offset = content_offset
        self.pointer_list_offset = pointer_list_offset

        file.seek(pointer_list_offset)
        self._offsets = decode_pointer_offsets(file.read())

    def offset_count(self):
        return len(self._offsets)

    def offset_at(self, index):
        """Return the pointer position at `index`, or None when there is none."""
        if 0 <= index < len(self._offsets):
            return self._offsets[index]
        return None
