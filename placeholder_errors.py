# -*- coding: utf-8 -*-
"""
Errors raised while reading a code_table.bin file and while converting strings
between game code units and placeholder text.

Every error is a ValueError so callers that only care about "bad input" can
catch that, while callers that report diagnostics can catch the precise class
and read its attributes.
"""


# Reading code_table.bin ------------------------------------------------------

class CodeTableReadError(ValueError):
    """Base class for failures while building a CodeTable from a file."""


class ContainerDecodeError(CodeTableReadError):
    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Can't decode the SIR0 container: {reason}")


class NotEnoughOffsets(CodeTableReadError):
    def __init__(self, count):
        self.count = count
        super().__init__(f"The SIR0 container only has {count} pointers, but it should have at least 5")


class MissingOffset(CodeTableReadError):
    def __init__(self, index):
        self.index = index
        super().__init__(f"The offset of pointer #{index} can't be obtained")


class EntryReadError(CodeTableReadError):
    def __init__(self, offset, reason):
        self.offset = offset
        self.reason = reason
        super().__init__(f"Can't read the code table entry at 0x{offset:X}: {reason}")


# Code units -> text ----------------------------------------------------------

class DecodeError(ValueError):
    """
    Base class for corrupt or truncated code-unit input.

    Attributes:
        partial (str): The text decoded before the failure, for diagnostics only.
    """

    def __init__(self, message, partial):
        self.partial = partial
        super().__init__(message)


class IncompleteEmbeddedData(DecodeError):
    def __init__(self, partial, label, expected, available):
        self.label = label
        self.expected = expected
        self.available = available
        super().__init__(
            f"The placeholder {label!r} needs {expected} more code unit(s) for its value, "
            f"but only {available} remain. The input is likely corrupted (partially decoded string: {partial!r})",
            partial)


class InvalidSurrogatePair(DecodeError):
    def __init__(self, partial, first, second):
        self.first = first
        self.second = second
        super().__init__(
            f"Can't decode the pair 0x{first:04X} 0x{second:04X} as a valid UTF-16 character. "
            f"The input is likely corrupted (partially decoded string: {partial!r})",
            partial)


class TrailingHighSurrogate(DecodeError):
    def __init__(self, partial, unit):
        self.unit = unit
        super().__init__(
            f"The string ends with the unpaired surrogate 0x{unit:04X}. "
            f"The encoding of the input is likely invalid (partially decoded string: {partial!r})",
            partial)


# Text -> code units ----------------------------------------------------------

class EncodeError(ValueError):
    """Base class for malformed placeholder text."""


class UselessEscape(EncodeError):
    def __init__(self, char):
        self.char = char
        super().__init__(
            f"The character {char!r} has been escaped, but it doesn't need to be. "
            "To display \\, write \\\\.")


class UnfinishedEscape(EncodeError):
    def __init__(self):
        super().__init__(
            "The string ends with an unescaped \\. To display \\, add another \\ at the end of the string.")


class UnclosedPlaceholder(EncodeError):
    def __init__(self, body):
        self.body = body
        super().__init__(
            f"The string ends inside the placeholder [{body}. A [ that is not preceded by \\ opens a "
            "placeholder and ] closes it.")


class EmptyPlaceholder(EncodeError):
    def __init__(self):
        super().__init__("The string contains an empty placeholder []. To display [], write \\[] instead.")


class PlaceholderTooManyParts(EncodeError):
    def __init__(self, parts):
        self.parts = list(parts)
        super().__init__(
            f"The placeholder has too many parts (parts are separated with :). The parts are {self.parts!r}")


class UnknownPlaceholder(EncodeError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"The placeholder {name!r} is unrecognized")


class InvalidValue(EncodeError):
    def __init__(self, value, directive):
        self.value = value
        self.directive = directive
        super().__init__(
            f"The value {value!r} for the placeholder {directive!r} is neither a hardcoded one nor a "
            "base 10 number between 0 and 4294967295")


class ArgumentOutOfRange(EncodeError):
    def __init__(self, value, label, maximum):
        self.value = value
        self.label = label
        self.maximum = maximum
        super().__init__(
            f"The placeholder {label!r} has the value {value}, but it can hold at most {maximum}")
