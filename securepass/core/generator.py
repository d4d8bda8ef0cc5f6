# -*- coding: utf-8 -*-
"""
SecurePass Generator - Character password generation from a recipe.
"""

import enum
from dataclasses import dataclass
from typing import List, Optional, Tuple

from securepass.core.alphabet import resolve_alphabet
from securepass.core.entropy import calculate_password_entropy, required_members
from securepass.core.log import get_logger
from securepass.core.recipe import Recipe
from securepass.core.sampler import SecureSampler

logger = get_logger('generator')


class TokenKind(enum.Enum):
    """Kind of a generated unit. Character recipes only produce atoms."""

    ATOM = "atom"


@dataclass(frozen=True)
class Token:
    value: str
    kind: TokenKind = TokenKind.ATOM


@dataclass(frozen=True)
class Password:
    """Generated password: tokens in draw order plus entropy in bits."""

    tokens: Tuple[Token, ...]
    entropy: float

    @property
    def value(self) -> str:
        return "".join(t.value for t in self.tokens)

    def __str__(self) -> str:
        return self.value

    def __len__(self) -> int:
        return len(self.tokens)


def generate_password(recipe: Recipe, sampler: Optional[SecureSampler] = None) -> Password:
    """
    Generate a password from a recipe.

    Each position is an independent uniform draw from the resolved alphabet.
    When the recipe has REQUIRE classes, a draw missing any of them is thrown
    away whole and redrawn, which keeps the result uniform over exactly the
    passwords counted by calculate_password_entropy.

    Args:
        recipe: Password recipe
        sampler: Sampler to draw from (default: system CSPRNG)

    Returns:
        Generated password

    Raises:
        EmptyAlphabet: If the recipe resolves to no characters
        UnsatisfiableRequirement: If the required classes cannot all be met
        EntropySourceExhausted: If the random source fails
    """
    sampler = sampler if sampler is not None else SecureSampler()

    alphabet = resolve_alphabet(recipe)
    entropy = calculate_password_entropy(recipe)
    required = [members for _, members in required_members(recipe, alphabet)]

    attempts = 0
    while True:
        attempts += 1
        indices = sampler.uniform_indices(len(alphabet), recipe.length)
        chars = [alphabet[int(i)] for i in indices]
        drawn = set(chars)
        if all(not drawn.isdisjoint(members) for members in required):
            break

    if attempts > 1:
        logger.debug("Required classes met after %d draws", attempts)

    return Password(tokens=tuple(Token(c) for c in chars), entropy=entropy)


def generate_passwords(
    recipe: Recipe,
    count: int,
    sampler: Optional[SecureSampler] = None
) -> List[Password]:
    """
    Generate ``count`` independent passwords from one recipe.

    Raises:
        ValueError: If count is below 1
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValueError(f"Password count must be a positive integer, got {count!r}")

    sampler = sampler if sampler is not None else SecureSampler()
    return [generate_password(recipe, sampler) for _ in range(count)]
