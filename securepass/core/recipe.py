"""
SecurePass Recipe - Declarative, immutable password policy.
"""

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Tuple, Union

from securepass.core.charclass import CharacterClass
from securepass.core.errors import InvalidLength


DEFAULT_LENGTH = 20


class InclusionState(enum.Enum):
    """How a character class takes part in a recipe."""

    UNSTATED = "unstated"  # Not included by this statement, but not excluded either
    ALLOW = "allow"        # May appear in the password
    REQUIRE = "require"    # At least one member must appear in each password
    EXCLUDE = "exclude"    # No member may appear in a password

    @classmethod
    def parse(cls, name: Union[str, "InclusionState"]) -> "InclusionState":
        """Parse a state name such as 'allow' or 'EXCLUDE'."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise ValueError(f"Inclusion state must be a name, got {name!r}")
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown inclusion state {name!r} (expected one of: {choices})") from None


class ClassFlag(enum.Flag):
    """Bitmask encoding of character classes, for building recipes."""

    NONE = 0
    UPPER = 1
    LOWER = 2
    DIGIT = 4
    SYMBOL = 8
    AMBIGUOUS = 16
    WHITESPACE = 32
    LETTERS = UPPER | LOWER


_FLAG_FOR_CLASS = {
    CharacterClass.UPPER: ClassFlag.UPPER,
    CharacterClass.LOWER: ClassFlag.LOWER,
    CharacterClass.DIGIT: ClassFlag.DIGIT,
    CharacterClass.SYMBOL: ClassFlag.SYMBOL,
    CharacterClass.AMBIGUOUS: ClassFlag.AMBIGUOUS,
    CharacterClass.WHITESPACE: ClassFlag.WHITESPACE,
}

DEFAULT_STATES: Dict[CharacterClass, InclusionState] = {
    CharacterClass.UPPER: InclusionState.ALLOW,
    CharacterClass.LOWER: InclusionState.ALLOW,
    CharacterClass.DIGIT: InclusionState.ALLOW,
    CharacterClass.SYMBOL: InclusionState.ALLOW,
    CharacterClass.AMBIGUOUS: InclusionState.EXCLUDE,
}

StatesInput = Union[
    Mapping[CharacterClass, InclusionState],
    Iterable[Tuple[CharacterClass, InclusionState]],
]


def _normalize_states(states: StatesInput) -> Tuple[Tuple[CharacterClass, InclusionState], ...]:
    given = dict(states.items() if isinstance(states, Mapping) else states)
    for tag in given:
        if not isinstance(tag, CharacterClass):
            raise TypeError(f"Recipe states must be keyed by CharacterClass, got {tag!r}")
    return tuple(
        (tag, InclusionState.parse(given.get(tag, InclusionState.UNSTATED)))
        for tag in CharacterClass
    )


@dataclass(frozen=True)
class Recipe:
    """
    Policy describing a character password.

    ``states`` accepts any mapping (or pairs) from CharacterClass to
    InclusionState; classes not mentioned are UNSTATED. It is stored as a
    tuple of pairs in class order so the recipe stays hashable.

    Raises:
        InvalidLength: If length is not an integer >= 1
    """

    length: int = DEFAULT_LENGTH
    states: StatesInput = field(default_factory=lambda: dict(DEFAULT_STATES))
    include_extra: str = ""
    exclude_extra: str = ""

    def __post_init__(self):
        if isinstance(self.length, bool) or not isinstance(self.length, int):
            raise InvalidLength(f"Password length must be an integer, got {self.length!r}")
        if self.length < 1:
            raise InvalidLength(f"Don't ask for passwords of length {self.length}")
        if not isinstance(self.include_extra, str) or not isinstance(self.exclude_extra, str):
            raise TypeError("include_extra and exclude_extra must be strings")
        object.__setattr__(self, 'states', _normalize_states(self.states))

    @classmethod
    def default(cls, length: int = DEFAULT_LENGTH) -> "Recipe":
        """Baseline recipe: letters, digits and symbols allowed, ambiguous excluded."""
        return cls(length=length)

    @classmethod
    def from_flags(
        cls,
        length: int,
        allow: ClassFlag = ClassFlag.NONE,
        require: ClassFlag = ClassFlag.NONE,
        exclude: ClassFlag = ClassFlag.NONE,
        include_extra: str = "",
        exclude_extra: str = "",
    ) -> "Recipe":
        """
        Build a recipe from flag sets, e.g. ``allow=ClassFlag.LETTERS | ClassFlag.DIGIT``.

        Raises:
            ValueError: If a class appears in more than one flag set
        """
        if (allow & require) or (allow & exclude) or (require & exclude):
            raise ValueError("A character class may appear in only one of allow/require/exclude")

        states = {}
        for tag, flag in _FLAG_FOR_CLASS.items():
            if flag & require:
                states[tag] = InclusionState.REQUIRE
            elif flag & allow:
                states[tag] = InclusionState.ALLOW
            elif flag & exclude:
                states[tag] = InclusionState.EXCLUDE
        return cls(
            length=length,
            states=states,
            include_extra=include_extra,
            exclude_extra=exclude_extra,
        )

    def state(self, tag: CharacterClass) -> InclusionState:
        return dict(self.states)[tag]

    def classes_in(self, state: InclusionState) -> Tuple[CharacterClass, ...]:
        return tuple(tag for tag, s in self.states if s is state)

    def required_classes(self) -> Tuple[CharacterClass, ...]:
        return self.classes_in(InclusionState.REQUIRE)

    def with_state(self, tag: CharacterClass, state: InclusionState) -> "Recipe":
        """Return a copy with one class set to ``state``."""
        states = dict(self.states)
        states[tag] = InclusionState.parse(state)
        return dataclasses.replace(self, states=states)

    def as_dict(self) -> Dict[str, object]:
        """Plain-data view (used for logging and config round trips)."""
        return {
            "length": self.length,
            "classes": {tag.value: s.value for tag, s in self.states},
            "include_extra": self.include_extra,
            "exclude_extra": self.exclude_extra,
        }
