# helpers to build code_table.bin files in memory
import io
import struct

import pytest

from code_table import CodeTable
from code_table_entry import CodeTableEntry


def encode_pointer_offsets(offsets):
    encoded = bytearray()
    previous = 0
    for offset in offsets:
        delta = offset - previous
        previous = offset
        groups = [delta & 0x7F]
        delta >>= 7
        while delta:
            groups.append(0x80 | (delta & 0x7F))
            delta >>= 7
        encoded.extend(reversed(groups))
    encoded.append(0)
    return bytes(encoded)


def build_sir0(body, pointer_offsets, content_offset=16):
    """body starts right after the 16 byte header; 4 and 8 are added to the pointers"""
    pointer_list_offset = 16 + len(body)
    header = struct.pack('<4sIII', b'SIR0', content_offset, pointer_list_offset, 0)
    return header + bytes(body) + encode_pointer_offsets([4, 8] + list(pointer_offsets))


def build_code_table_bin(entries):
    """entries are (label, code_value, flags, word_count, reserved); label may be raw bytes"""
    body = bytearray(4)  # reserved pointer to the entry list
    label_offsets = []
    for entry in entries:
        label = entry[0]
        raw_label = label if isinstance(label, bytes) else label.encode('utf-16-le') + b'\x00\x00'
        label_offsets.append(16 + len(body))
        body += raw_label
    while len(body) % 4:
        body += b'\x00'

    entries_offset = 16 + len(body)
    entry_offsets = []
    for label_offset, entry in zip(label_offsets, entries):
        entry_offsets.append(16 + len(body))
        body += struct.pack('<IHHHH', label_offset, *entry[1:])

    content_offset = 16 + len(body)
    body += struct.pack('<II', entries_offset, 16 + 4)
    struct.pack_into('<I', body, 0, entries_offset)

    pointers = [16] + entry_offsets + [content_offset, content_offset + 4]
    return build_sir0(body, pointers, content_offset)


SAMPLE_ENTRIES = [
    ("hero_name", 0x1000, 0, 0, 0),
    ("partner_name", 0x1001, 0, 0, 0),
    ("color:", 0x1A00, 1, 0, 0),
    ("color:red", 0x1B01, 0, 0, 0),
    ("value:", 0x1C00, 1, 2, 7),
    ("short:", 0x1D00, 1, 1, 0),
]


@pytest.fixture
def sample_table():
    return CodeTable(CodeTableEntry.create(*entry) for entry in SAMPLE_ENTRIES)


@pytest.fixture
def decoder(sample_table):
    return sample_table.generate_code_to_text()


@pytest.fixture
def encoder(sample_table):
    return sample_table.generate_text_to_code()


@pytest.fixture
def code_table_file(tmp_path):
    path = tmp_path / "code_table.bin"
    path.write_bytes(build_code_table_bin(SAMPLE_ENTRIES))
    return str(path)


@pytest.fixture
def code_table_stream():
    return io.BytesIO(build_code_table_bin(SAMPLE_ENTRIES))
