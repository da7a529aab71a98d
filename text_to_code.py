# -*- coding: utf-8 -*-
"""
Convert placeholder text back into the 16 bit code units used by the game.

Syntax:
    \\[          a literal [
    \\\\          a literal \\
    [name]      a placeholder without value, or a hardcoded one
    [name:123]  a placeholder with a base 10 value
"""
import re

from code_table_entry import ArgumentKind
from placeholder_errors import (
    ArgumentOutOfRange,
    EmptyPlaceholder,
    InvalidValue,
    PlaceholderTooManyParts,
    UnclosedPlaceholder,
    UnfinishedEscape,
    UnknownPlaceholder,
    UselessEscape,
)

# Matches a placeholder value: base 10 digits only, no sign, whitespace or trailing newline
rePlaceholderValue = re.compile(r'^[0-9]+\Z')

MAX_VALUE = 0xFFFFFFFF
MAX_INLINE_VALUE = 0xFF
MAX_UNIT = 0xFFFF


def utf16_units(char):
    """Return the UTF-16 code units of a single character."""
    code_point = ord(char)
    if code_point < 0x10000:
        return [code_point]
    code_point -= 0x10000
    return [0xD800 | (code_point >> 10), 0xDC00 | (code_point & 0x3FF)]


def split_placeholder(iterator):
    """
    Consume the characters after a [ up to the closing ] and split them into
    parts. A : ends a part and stays at the end of it, so "color:5" gives
    ["color:", "5"].
    """
    parts = []
    current = []
    body = []
    for char in iterator:
        if char == ']':
            parts.append(''.join(current))
            break
        body.append(char)
        current.append(char)
        if char == ':':
            parts.append(''.join(current))
            current = []
    else:
        raise UnclosedPlaceholder(''.join(body))

    if not body:
        raise EmptyPlaceholder()
    return parts


class TextToCode:
    """
    Encoder built from a label -> entry mapping.

    Obtain one with CodeTable.generate_text_to_code(). It keeps no state between
    calls, so one instance can be shared by any number of callers.
    """

    def __init__(self, label_index):
        self.label_index = label_index

    def lookup(self, directive):
        """Find the entry for a directive, with or without its trailing :."""
        entry = self.label_index.get(directive)
        if entry is None and directive.endswith(':'):
            entry = self.label_index.get(directive[:-1])
        return entry

    def placeholder_units(self, entry):
        """Units for an entry written without a value; multi-word values are zero."""
        if entry.kind is ArgumentKind.MULTI_WORD:
            return [entry.code_value] + [0] * entry.word_count
        return [entry.code_value]

    def encode_placeholder(self, parts):
        if len(parts) == 1:
            directive, value = parts[0], None
        elif len(parts) == 2:
            directive, value = parts
        else:
            raise PlaceholderTooManyParts(parts)

        if value is None:
            entry = self.lookup(directive)
            if entry is None:
                raise UnknownPlaceholder(directive)
            return self.placeholder_units(entry)

        # hardcoded placeholders carry their value in the label, like "color:red"
        hardcoded = self.label_index.get(directive + value)
        if hardcoded is not None:
            return self.placeholder_units(hardcoded)

        entry = self.lookup(directive)
        if entry is None:
            raise UnknownPlaceholder(directive)
        if not rePlaceholderValue.match(value) or int(value) > MAX_VALUE:
            raise InvalidValue(value, directive)
        number = int(value)

        if entry.kind is not ArgumentKind.MULTI_WORD:
            if number > MAX_INLINE_VALUE:
                raise ArgumentOutOfRange(number, entry.label, MAX_INLINE_VALUE)
            if entry.code_value + number > MAX_UNIT:
                raise ArgumentOutOfRange(number, entry.label, MAX_UNIT - entry.code_value)
            return [entry.code_value + number]

        maximum = min(MAX_VALUE, (1 << (16 * entry.word_count)) - 1)
        if number > maximum:
            raise ArgumentOutOfRange(number, entry.label, maximum)
        words = [entry.code_value]
        for _ in range(entry.word_count):
            words.append(number & 0xFFFF)
            number >>= 16
        return words

    def encode(self, text):
        """Encode placeholder text into code units.

        Args:
            text (str): The text to encode.

        Returns:
            list[int]: The 16 bit code units.

        Raises:
            EncodeError: The text is malformed; the subclass tells what and where.
        """
        result = []
        iterator = iter(text)

        for char in iterator:
            if char == '\\':
                next_char = next(iterator, None)
                if next_char is None:
                    raise UnfinishedEscape()
                if next_char not in ('[', '\\'):
                    raise UselessEscape(next_char)
                result.extend(utf16_units(next_char))
            elif char == '[':
                result.extend(self.encode_placeholder(split_placeholder(iterator)))
            else:
                result.extend(utf16_units(char))

        return result
