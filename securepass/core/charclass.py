# -*- coding: utf-8 -*-
"""
SecurePass Character Classes - Fixed character sets usable as policy units.
"""

import enum
import string
from typing import Dict, Tuple


# Character sets
UPPER = string.ascii_uppercase
LOWER = string.ascii_lowercase
DIGITS = string.digits
SYMBOLS = "!#%)*+,-.:=>?@]^_}~"
AMBIGUOUS = "0O1Il5S"
WHITESPACE = " \t"


class CharacterClass(enum.Enum):
    """Closed set of character class tags, iterated in declaration order."""

    UPPER = "upper"
    LOWER = "lower"
    DIGIT = "digit"
    SYMBOL = "symbol"
    AMBIGUOUS = "ambiguous"
    WHITESPACE = "whitespace"

    @classmethod
    def parse(cls, name: str) -> "CharacterClass":
        """
        Look up a class by enum name, value or common plural alias.

        Raises:
            ValueError: If the name matches no class
        """
        key = name.strip().lower()
        tag = _ALIASES.get(key)
        if tag is None:
            raise ValueError(f"Unknown character class: {name!r}")
        return tag


_ALIASES: Dict[str, CharacterClass] = {}
for _tag in CharacterClass:
    _ALIASES[_tag.value] = _tag
    _ALIASES[_tag.name.lower()] = _tag
_ALIASES.update({
    "uppers": CharacterClass.UPPER,
    "uppercase": CharacterClass.UPPER,
    "lowers": CharacterClass.LOWER,
    "lowercase": CharacterClass.LOWER,
    "digits": CharacterClass.DIGIT,
    "symbols": CharacterClass.SYMBOL,
    "space": CharacterClass.WHITESPACE,
})


_MEMBERS: Dict[CharacterClass, Tuple[str, ...]] = {
    CharacterClass.UPPER: tuple(UPPER),
    CharacterClass.LOWER: tuple(LOWER),
    CharacterClass.DIGIT: tuple(DIGITS),
    CharacterClass.SYMBOL: tuple(SYMBOLS),
    CharacterClass.AMBIGUOUS: tuple(AMBIGUOUS),
    CharacterClass.WHITESPACE: tuple(WHITESPACE),
}


def class_members(tag: CharacterClass) -> Tuple[str, ...]:
    """Return the ordered single-character members of a class."""
    return _MEMBERS[tag]


def letters() -> Tuple[str, ...]:
    """Uppercase followed by lowercase letters."""
    return _MEMBERS[CharacterClass.UPPER] + _MEMBERS[CharacterClass.LOWER]
