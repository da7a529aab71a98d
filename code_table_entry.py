# -*- coding: utf-8 -*-
from collections import namedtuple
from enum import Enum

BLOCK_MASK = 0xFF00
OFFSET_MASK = 0x00FF


class ArgumentKind(Enum):
    NO_ARGUMENT = "none"
    # 0-255 stored in the low byte of the placeholder unit itself
    INLINE_OFFSET = "inline"
    # stored in the code units that follow the placeholder unit
    MULTI_WORD = "multi"


def argument_kind(flags, word_count):
    if flags == 0:
        return ArgumentKind.NO_ARGUMENT
    if word_count == 0:
        return ArgumentKind.INLINE_OFFSET
    return ArgumentKind.MULTI_WORD


class CodeTableEntry(namedtuple('CodeTableEntry', 'label code_value flags word_count reserved kind')):
    """
    One code unit <-> placeholder label pair.

    Use `create` rather than the constructor so `kind` always agrees with
    `flags` and `word_count`.
    """
    __slots__ = ()

    @classmethod
    def create(cls, label, code_value, flags=0, word_count=0, reserved=0):
        return cls(label, code_value, flags, word_count, reserved, argument_kind(flags, word_count))
