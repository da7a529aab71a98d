# -*- coding: utf-8 -*-
"""
Convert the 16 bit code units of a game string into placeholder text.

Placeholders come out as [label] or [label<value>], a literal [ as \\[ and a
literal \\ as \\\\, so the result can be turned back into code units by
text_to_code.TextToCode.
"""
import struct

from code_table_entry import BLOCK_MASK, OFFSET_MASK, ArgumentKind
from placeholder_errors import IncompleteEmbeddedData, InvalidSurrogatePair, TrailingHighSurrogate

OPEN_BRACKET_UNIT = ord('[')
BACKSLASH_UNIT = ord('\\')


def is_surrogate(unit):
    return 0xD800 <= unit <= 0xDFFF


class CodeToText:
    """
    Decoder built from a code value -> entry mapping.

    Obtain one with CodeTable.generate_code_to_text(). It keeps no state between
    calls, so one instance can be shared by any number of callers.
    """

    def __init__(self, code_index):
        self.code_index = code_index

    def match(self, unit):
        """Return (entry, offset) for a placeholder unit, or (None, 0) for a literal one."""
        entry = self.code_index.get(unit)
        if entry is not None:
            return entry, 0
        entry = self.code_index.get(unit & BLOCK_MASK)
        if entry is not None:
            return entry, unit & OFFSET_MASK
        return None, 0

    def decode(self, units):
        """Decode a sequence of code units into placeholder text.

        Args:
            units (Sequence[int]): The 16 bit code units of one string.

        Returns:
            str: The decoded text.

        Raises:
            IncompleteEmbeddedData: A placeholder value runs past the end of the input.
            InvalidSurrogatePair: A surrogate is not followed by its partner.
            TrailingHighSurrogate: The input ends with a surrogate.
        """
        result = []
        iterator = iter(units)

        for unit in iterator:
            entry, offset = self.match(unit)
            if entry is not None:
                if entry.kind is ArgumentKind.NO_ARGUMENT:
                    value_text = ""
                elif entry.kind is ArgumentKind.INLINE_OFFSET:
                    value_text = str(offset)
                else:
                    value = 0
                    for index in range(entry.word_count):
                        word = next(iterator, None)
                        if word is None:
                            raise IncompleteEmbeddedData(''.join(result), entry.label, entry.word_count, index)
                        value |= word << (16 * index)
                    value_text = str(value & 0xFFFFFFFF)
                result.append(f"[{entry.label}{value_text}]")
            elif unit == OPEN_BRACKET_UNIT:
                result.append("\\[")
            elif unit == BACKSLASH_UNIT:
                result.append("\\\\")
            elif not is_surrogate(unit):
                result.append(chr(unit))
            else:
                next_unit = next(iterator, None)
                if next_unit is None:
                    raise TrailingHighSurrogate(''.join(result), unit)
                try:
                    result.append(struct.pack('<HH', unit, next_unit).decode('utf-16-le'))
                except UnicodeDecodeError as err:
                    raise InvalidSurrogatePair(''.join(result), unit, next_unit) from err

        return ''.join(result)
