"""
SecurePass Core - Alphabet resolution, secure sampling, entropy and generation.
"""

from securepass.core.charclass import CharacterClass, class_members, letters

from securepass.core.recipe import ClassFlag, InclusionState, Recipe

from securepass.core.alphabet import Alphabet, resolve_alphabet

from securepass.core.entropy import (
    calculate_password_entropy,
    count_valid_passwords,
    naive_entropy_bits,
)

from securepass.core.source import (
    ArrayByteSource,
    ByteSource,
    DeterministicSource,
    SystemSource,
    get_default_source,
)

from securepass.core.sampler import SecureSampler

from securepass.core.generator import (
    Password,
    Token,
    TokenKind,
    generate_password,
    generate_passwords,
)

from securepass.core.health import HealthTests

from securepass.core.errors import (
    EmptyAlphabet,
    EntropySourceExhausted,
    InvalidLength,
    SecurePassError,
    UnsatisfiableRequirement,
)

__all__ = [
    "CharacterClass",
    "class_members",
    "letters",
    "ClassFlag",
    "InclusionState",
    "Recipe",
    "Alphabet",
    "resolve_alphabet",
    "calculate_password_entropy",
    "count_valid_passwords",
    "naive_entropy_bits",
    "ArrayByteSource",
    "ByteSource",
    "DeterministicSource",
    "SystemSource",
    "get_default_source",
    "SecureSampler",
    "Password",
    "Token",
    "TokenKind",
    "generate_password",
    "generate_passwords",
    "HealthTests",
    "EmptyAlphabet",
    "EntropySourceExhausted",
    "InvalidLength",
    "SecurePassError",
    "UnsatisfiableRequirement",
]
