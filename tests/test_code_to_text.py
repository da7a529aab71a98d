# code units -> placeholder text
import pytest

from code_table import CodeTable
from code_table_entry import CodeTableEntry
from placeholder_errors import DecodeError, IncompleteEmbeddedData, InvalidSurrogatePair, TrailingHighSurrogate
from conftest import SAMPLE_ENTRIES


def units(text):
    return [ord(char) for char in text]


def test_plain_text(decoder):
    assert decoder.decode(units("Hello!")) == "Hello!"
    assert decoder.decode([]) == ""


def test_no_argument_entries_decode_to_their_label(sample_table, decoder):
    for entry in sample_table.entries():
        if entry.flags == 0:
            assert decoder.decode([entry.code_value]) == f"[{entry.label}]"


def test_inline_offset_every_value_in_the_block(decoder):
    for offset in range(256):
        assert decoder.decode([0x1A00 | offset]) == f"[color:{offset}]"


def test_exact_match_wins_over_block_match():
    table = CodeTable([
        CodeTableEntry.create("color:", 0x1A00, flags=1),
        CodeTableEntry.create("special", 0x1A07),
    ])
    decoder = table.generate_code_to_text()
    assert decoder.decode([0x1A07, 0x1A08]) == "[special][color:8]"


def test_concrete_color_scenario():
    table = CodeTable([CodeTableEntry.create("color", 0x0100, flags=1)])
    assert table.generate_code_to_text().decode([0x0100 | 5]) == "[color5]"


def test_multi_word_value_is_little_endian(decoder):
    assert decoder.decode([0x1C00, 0x1170, 0x0001]) == "[value:70000]"
    assert decoder.decode([0x1C00, 0xFFFF, 0xFFFF]) == "[value:4294967295]"
    assert decoder.decode([0x1D00, 0x0000, 0x0041]) == "[short:0]A"


def test_multi_word_block_match_ignores_the_low_byte(decoder):
    assert decoder.decode([0x1D09, 0x0010]) == "[short:16]"


def test_escapes(decoder):
    assert decoder.decode(units("[a]")) == "\\[a]"
    assert decoder.decode(units("C:\\")) == "C:\\\\"


def test_mixed_text(decoder):
    data = units("Hi ") + [0x1000] + units(", ") + [0x1A03] + units("ok") + [0x1B01]
    assert decoder.decode(data) == "Hi [hero_name], [color:3]ok[color:red]"


def test_surrogate_pair(decoder):
    assert decoder.decode([0xD83D, 0xDE00]) == "\U0001F600"


def test_incomplete_embedded_data(decoder):
    with pytest.raises(IncompleteEmbeddedData) as excinfo:
        decoder.decode(units("ab") + [0x1C00, 0x0001])
    assert excinfo.value.partial == "ab"
    assert excinfo.value.expected == 2
    assert excinfo.value.available == 1


def test_trailing_high_surrogate(decoder):
    with pytest.raises(TrailingHighSurrogate) as excinfo:
        decoder.decode(units("ab") + [0xD83D])
    assert excinfo.value.partial == "ab"
    assert excinfo.value.unit == 0xD83D


def test_invalid_surrogate_pair(decoder):
    with pytest.raises(InvalidSurrogatePair) as excinfo:
        decoder.decode([0x41, 0xD83D, 0x0041])
    assert excinfo.value.partial == "A"
    assert (excinfo.value.first, excinfo.value.second) == (0xD83D, 0x0041)


def test_lone_low_surrogate(decoder):
    with pytest.raises(InvalidSurrogatePair):
        decoder.decode([0xDE00, 0xDE00])


def test_decode_errors_are_value_errors(decoder):
    with pytest.raises(DecodeError):
        decoder.decode([0xD800])
    with pytest.raises(ValueError):
        decoder.decode([0xD800])


def test_decoder_keeps_no_state(decoder):
    with pytest.raises(IncompleteEmbeddedData):
        decoder.decode([0x1C00])
    assert decoder.decode([0x1000]) == "[hero_name]"
    assert len(SAMPLE_ENTRIES) == len(decoder.code_index)
