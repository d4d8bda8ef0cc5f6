from __future__ import annotations

import itertools
import unittest

from securepass.core.alphabet import Alphabet, resolve_alphabet, subtract_chars
from securepass.core.charclass import CharacterClass, class_members, letters
from securepass.core.errors import EmptyAlphabet
from securepass.core.recipe import InclusionState, Recipe

A = InclusionState.ALLOW
R = InclusionState.REQUIRE
X = InclusionState.EXCLUDE


class AlphabetResolverTests(unittest.TestCase):
    def test_letters_and_digits_without_ambiguous(self) -> None:
        recipe = Recipe(
            length=8,
            states={
                CharacterClass.UPPER: A,
                CharacterClass.LOWER: A,
                CharacterClass.DIGIT: A,
                CharacterClass.SYMBOL: X,
                CharacterClass.AMBIGUOUS: X,
            },
        )
        alphabet = resolve_alphabet(recipe)
        expected = (set(letters()) | set("0123456789")) - set("0O1Il5S")
        self.assertEqual(set(alphabet), expected)
        self.assertEqual(len(alphabet), 55)

    def test_default_recipe(self) -> None:
        alphabet = resolve_alphabet(Recipe())
        self.assertEqual(len(alphabet), 26 + 26 + 10 + 19 - 7)
        self.assertNotIn("O", alphabet)
        self.assertIn("!", alphabet)
        self.assertNotIn(" ", alphabet)

    def test_overlapping_classes_are_deduplicated_in_order(self) -> None:
        recipe = Recipe(length=4, states={CharacterClass.DIGIT: A, CharacterClass.AMBIGUOUS: A})
        alphabet = resolve_alphabet(recipe)
        self.assertEqual(alphabet.as_string(), "0123456789OIlS")

    def test_require_contributes_like_allow(self) -> None:
        allowed = resolve_alphabet(Recipe(length=4, states={CharacterClass.SYMBOL: A}))
        required = resolve_alphabet(Recipe(length=4, states={CharacterClass.SYMBOL: R}))
        self.assertEqual(allowed, required)

    def test_class_exclusion_beats_include_extra(self) -> None:
        recipe = Recipe(length=4, states={CharacterClass.DIGIT: X}, include_extra="a1b2")
        self.assertEqual(resolve_alphabet(recipe).as_string(), "ab")

    def test_exclude_extra_beats_allowed_class(self) -> None:
        recipe = Recipe(length=4, states={CharacterClass.DIGIT: A}, exclude_extra="13579")
        self.assertEqual(resolve_alphabet(recipe).as_string(), "02468")

    def test_include_extra_only(self) -> None:
        recipe = Recipe(length=4, states={}, include_extra="€")
        self.assertEqual(resolve_alphabet(recipe).chars, ("€",))

    def test_empty_alphabet_raises(self) -> None:
        with self.assertRaises(EmptyAlphabet):
            resolve_alphabet(Recipe(length=4, states={CharacterClass.DIGIT: A}, exclude_extra="0123456789"))
        with self.assertRaises(EmptyAlphabet):
            resolve_alphabet(Recipe(length=4, states={CharacterClass.DIGIT: X}, include_extra="0123456789"))
        with self.assertRaises(EmptyAlphabet):
            resolve_alphabet(Recipe(length=4, states={}))

    def test_resolution_is_deterministic(self) -> None:
        recipe = Recipe(length=10, include_extra="zyx€")
        first = resolve_alphabet(recipe)
        second = resolve_alphabet(Recipe(length=10, include_extra="zyx€"))
        self.assertEqual(first.as_string(), second.as_string())

    def test_membership_invariants_over_all_state_combinations(self) -> None:
        include_extra = "€a0 "
        exclude_extra = "b!"
        tags = list(CharacterClass)
        for combo in itertools.product(list(InclusionState), repeat=len(tags)):
            recipe = Recipe(
                length=3,
                states=dict(zip(tags, combo)),
                include_extra=include_extra,
                exclude_extra=exclude_extra,
            )
            allowed = set(include_extra)
            vetoed = set(exclude_extra)
            for tag, state in zip(tags, combo):
                if state in (A, R):
                    allowed |= set(class_members(tag))
                elif state is X:
                    vetoed |= set(class_members(tag))

            try:
                alphabet = resolve_alphabet(recipe)
            except EmptyAlphabet:
                self.assertEqual(allowed - vetoed, set(), combo)
                continue

            chars = alphabet.chars
            self.assertEqual(len(chars), len(set(chars)), combo)
            self.assertEqual(set(chars), allowed - vetoed, combo)


class AlphabetTypeTests(unittest.TestCase):
    def test_sequence_behaviour(self) -> None:
        alphabet = Alphabet("abca")
        self.assertEqual(len(alphabet), 3)
        self.assertEqual(alphabet[1], "b")
        self.assertEqual(list(alphabet), ["a", "b", "c"])
        self.assertIn("c", alphabet)
        self.assertNotIn("d", alphabet)
        self.assertEqual(alphabet.members_of("cxa"), frozenset("ac"))

    def test_rejects_multi_character_entries(self) -> None:
        with self.assertRaises(ValueError):
            Alphabet(["ab"])

    def test_subtract_chars(self) -> None:
        self.assertEqual(subtract_chars("aabbcc", "b"), ("a", "c"))
        self.assertEqual(subtract_chars("abc", ""), ("a", "b", "c"))


if __name__ == "__main__":
    unittest.main()
