"""
SecurePass Entropy - Information-theoretic strength of a recipe.

Passwords are uniform over every string of ``length`` alphabet characters
that contains at least one member of each REQUIRE class. The estimator counts
that set exactly (inclusion-exclusion over the required classes) and reports
log2 of the count. Without required classes this is ``length * log2(n)``.
"""

import itertools
import math
from typing import List, Tuple

import numpy as np

from securepass.core.alphabet import Alphabet, resolve_alphabet
from securepass.core.charclass import CharacterClass, class_members
from securepass.core.errors import UnsatisfiableRequirement
from securepass.core.recipe import Recipe


def naive_entropy_bits(length: int, alphabet_size: int) -> float:
    """
    Entropy of ``length`` independent uniform draws from ``alphabet_size`` symbols.

    Args:
        length: Password length
        alphabet_size: Number of distinct characters

    Returns:
        Entropy in bits
    """
    return float(length * np.log2(alphabet_size))


def required_members(recipe: Recipe, alphabet: Alphabet) -> List[Tuple[CharacterClass, frozenset]]:
    """
    Members of each required class that survived into the alphabet.

    Raises:
        UnsatisfiableRequirement: If a required class has no member left
    """
    out = []
    for tag in recipe.required_classes():
        members = alphabet.members_of(class_members(tag))
        if not members:
            raise UnsatisfiableRequirement(
                f"Class {tag.value!r} is required but all of its characters are excluded"
            )
        out.append((tag, members))
    return out


def count_valid_passwords(recipe: Recipe) -> int:
    """
    Exact number of passwords the recipe can produce.

    Inclusion-exclusion: sum over subsets S of the required classes of
    (-1)^|S| * (n - |union(S)|)^length.

    Raises:
        EmptyAlphabet: If the recipe resolves to no characters
        UnsatisfiableRequirement: If no password can meet every requirement
    """
    alphabet = resolve_alphabet(recipe)
    n = len(alphabet)
    required = [members for _, members in required_members(recipe, alphabet)]

    total = 0
    for size in range(len(required) + 1):
        sign = -1 if size % 2 else 1
        for subset in itertools.combinations(required, size):
            covered = len(frozenset().union(*subset))
            total += sign * (n - covered) ** recipe.length

    if total <= 0:
        raise UnsatisfiableRequirement(
            f"No password of length {recipe.length} can contain every required class "
            f"({', '.join(t.value for t in recipe.required_classes())})"
        )
    return total


def calculate_password_entropy(recipe: Recipe) -> float:
    """
    Calculate the entropy of a password generated from ``recipe``.

    Args:
        recipe: Password recipe

    Returns:
        Entropy in bits (non-negative)

    Raises:
        EmptyAlphabet: If the recipe resolves to no characters
        UnsatisfiableRequirement: If the required classes cannot all be met
    """
    if not recipe.required_classes():
        return naive_entropy_bits(recipe.length, len(resolve_alphabet(recipe)))
    return float(math.log2(count_valid_passwords(recipe)))
