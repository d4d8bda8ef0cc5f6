"""
SecurePass Alphabet - Resolve a recipe into the exact set of usable characters.
"""

import functools
from typing import Iterable, Iterator, Tuple

from securepass.core.charclass import CharacterClass, class_members
from securepass.core.errors import EmptyAlphabet
from securepass.core.log import get_logger
from securepass.core.recipe import InclusionState, Recipe

logger = get_logger('alphabet')


class Alphabet:
    """
    Deduplicated, order-stable sequence of single characters.

    Instances are immutable and safe to share between threads.
    """

    __slots__ = ('_chars', '_index')

    def __init__(self, chars: Iterable[str]):
        ordered = tuple(dict.fromkeys(chars))
        for ch in ordered:
            if len(ch) != 1:
                raise ValueError(f"Alphabet entries must be single characters, got {ch!r}")
        self._chars = ordered
        self._index = frozenset(ordered)

    def __len__(self) -> int:
        return len(self._chars)

    def __getitem__(self, i):
        return self._chars[i]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chars)

    def __contains__(self, ch: object) -> bool:
        return ch in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._chars == other._chars

    def __hash__(self) -> int:
        return hash(self._chars)

    def __repr__(self) -> str:
        return f"Alphabet({self.as_string()!r})"

    @property
    def chars(self) -> Tuple[str, ...]:
        return self._chars

    def as_string(self) -> str:
        return "".join(self._chars)

    def members_of(self, chars: Iterable[str]) -> frozenset:
        """Characters of ``chars`` that survived into this alphabet."""
        return frozenset(ch for ch in chars if ch in self._index)


def subtract_chars(included: str, excluded: str) -> Tuple[str, ...]:
    """
    Character-wise set difference, keeping first-appearance order.

    Every character present anywhere in ``excluded`` is removed from
    ``included``, no matter how many times it was added.
    """
    veto = set(excluded)
    return tuple(dict.fromkeys(ch for ch in included if ch not in veto))


def resolve_alphabet(recipe: Recipe) -> Alphabet:
    """
    Build the alphabet for a recipe.

    ALLOW and REQUIRE classes add their members, EXCLUDE classes veto theirs,
    then the caller's literal extras are applied. Exclusion always wins.

    Args:
        recipe: Password recipe

    Returns:
        Resolved alphabet (never empty)

    Raises:
        EmptyAlphabet: If nothing survives the exclusions
    """
    return _resolve_cached(recipe)


@functools.lru_cache(maxsize=128)
def _resolve_cached(recipe: Recipe) -> Alphabet:
    included = ""
    excluded = ""
    for tag in CharacterClass:
        state = recipe.state(tag)
        if state in (InclusionState.ALLOW, InclusionState.REQUIRE):
            included += "".join(class_members(tag))
        elif state is InclusionState.EXCLUDE:
            excluded += "".join(class_members(tag))

    included += recipe.include_extra
    excluded += recipe.exclude_extra

    alphabet = Alphabet(subtract_chars(included, excluded))
    if not alphabet:
        raise EmptyAlphabet(
            "Recipe leaves no characters to choose from "
            "(every allowed character is also excluded)"
        )
    logger.debug("Resolved alphabet of %d characters", len(alphabet))
    return alphabet
