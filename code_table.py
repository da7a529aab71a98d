# -*- coding: utf-8 -*-
"""
code_table.bin: the list of code units that the game uses as placeholders.

The file is used by Pokémon Super Mystery Dungeon and Pokémon Rescue Team DX.
It is a SIR0 container whose pointers 3 to count - 2 each point at one entry
record:

    u32  pointer to a null-terminated UTF-16LE label
    u16  code value
    u16  flags
    u16  word count
    u16  reserved
"""
import struct
from types import MappingProxyType

from code_table_entry import OFFSET_MASK, ArgumentKind, CodeTableEntry
from placeholder_errors import EntryReadError, MissingOffset, NotEnoughOffsets
from sir0 import Sir0
from code_to_text import CodeToText
from text_to_code import TextToCode

# The first 3 and the last 2 pointers of the container are not entries.
LEADING_RESERVED_OFFSETS = 3
TRAILING_RESERVED_OFFSETS = 2
MIN_OFFSET_COUNT = LEADING_RESERVED_OFFSETS + TRAILING_RESERVED_OFFSETS

ENTRY_RECORD = struct.Struct('<IHHHH')


def readNullWideString(offset, file):
    """Reads a null-terminated UTF-16LE string at the given file offset.

    Args:
        offset (int): Absolute position of the first code unit.
        file (file): The binary file object to read from.

    Returns:
        str: The decoded string, without its terminator.
    """
    currentPosition = file.tell()
    file.seek(offset)
    textLine = b''
    try:
        while True:
            unit = file.read(2)
            if len(unit) < 2:
                raise EntryReadError(offset, "the label is not null-terminated")
            if unit == b'\x00\x00':
                break
            textLine += unit
    finally:
        file.seek(currentPosition)
    try:
        return textLine.decode('utf-16-le')
    except UnicodeDecodeError as err:
        raise EntryReadError(offset, f"the label is not valid UTF-16 ({err.reason})") from err


def readCodeTableEntry(offset, file):
    """Read the entry record at `offset`, following its label pointer."""
    file.seek(offset)
    chunk = file.read(ENTRY_RECORD.size)
    if len(chunk) < ENTRY_RECORD.size:
        raise EntryReadError(offset, f"the record is truncated ({len(chunk)} of {ENTRY_RECORD.size} bytes)")
    labelOffset, codeValue, flags, wordCount, reserved = ENTRY_RECORD.unpack(chunk)
    try:
        label = readNullWideString(labelOffset, file)
    except EntryReadError as err:
        raise EntryReadError(offset, f"label at 0x{labelOffset:X}: {err.reason}") from err
    return CodeTableEntry.create(label, codeValue, flags, wordCount, reserved)


class CodeTable:
    """
    An ordered, read-only list of code table entries.

    Both lookup builders index every entry in order, so when two entries share
    a code value or a label the later one wins.
    """

    def __init__(self, entries=()):
        self._entries = tuple(entries)

    @classmethod
    def from_file(cls, file):
        """Build the table from an opened code_table.bin file.

        Args:
            file (file): A seekable binary file object.

        Raises:
            ContainerDecodeError: The SIR0 container can't be decoded.
            NotEnoughOffsets: The container has fewer than 5 pointers.
            MissingOffset: An entry pointer can't be obtained.
            EntryReadError: An entry record or its label can't be read.
        """
        return cls.from_container(Sir0(file))

    @classmethod
    def from_container(cls, container):
        """
        Build the table from an opened container.

        The container needs `offset_count()`, `offset_at(index)` (None when the
        offset can't be obtained) and the seekable binary `file` the offsets
        point into.
        """
        offsetCount = container.offset_count()
        if offsetCount < MIN_OFFSET_COUNT:
            raise NotEnoughOffsets(offsetCount)

        entries = []
        for pointerId in range(LEADING_RESERVED_OFFSETS, offsetCount - TRAILING_RESERVED_OFFSETS):
            pointer = container.offset_at(pointerId)
            if pointer is None:
                raise MissingOffset(pointerId)
            entries.append(readCodeTableEntry(pointer, container.file))
        return cls(entries)

    def entries(self):
        return self._entries

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def build_code_index(self):
        code_index = {}
        for entry in self._entries:
            code_index[entry.code_value] = entry
        return MappingProxyType(code_index)

    def build_label_index(self):
        label_index = {}
        for entry in self._entries:
            label_index[entry.label] = entry
        return MappingProxyType(label_index)

    def generate_code_to_text(self):
        return CodeToText(self.build_code_index())

    def generate_text_to_code(self):
        return TextToCode(self.build_label_index())

    def find_misaligned_entries(self):
        """
        Return the inline-offset entries whose code value is not the start of a
        256 value block. Block matching is undefined for those entries.
        """
        return [entry for entry in self._entries
                if entry.kind is ArgumentKind.INLINE_OFFSET and entry.code_value & OFFSET_MASK]


def read_code_table(code_table_file):
    """Open and read a code_table.bin file from disk."""
    with open(code_table_file, 'rb') as tableIn:
        return CodeTable.from_file(tableIn)
