"""
SecurePass - Policy-driven character password generator.

Resolves a declarative recipe over character classes into an exact alphabet,
draws passwords from it with unbiased rejection sampling over a
cryptographically secure source, and reports honest entropy.
"""

__version__ = "1.0.0"

from securepass.core.recipe import (
    ClassFlag,
    InclusionState,
    Recipe,
)

from securepass.core.charclass import CharacterClass, class_members

from securepass.core.alphabet import Alphabet, resolve_alphabet

from securepass.core.entropy import (
    calculate_password_entropy,
    count_valid_passwords,
)

from securepass.core.sampler import SecureSampler

from securepass.core.source import (
    ArrayByteSource,
    DeterministicSource,
    SystemSource,
)

from securepass.core.generator import (
    Password,
    Token,
    generate_password,
    generate_passwords,
)

from securepass.core.health import HealthTests

from securepass.core.errors import (
    SecurePassError,
    InvalidLength,
    EmptyAlphabet,
    UnsatisfiableRequirement,
    EntropySourceExhausted,
)

__all__ = [
    # Version
    "__version__",
    # Recipe
    "ClassFlag",
    "InclusionState",
    "Recipe",
    "CharacterClass",
    "class_members",
    # Alphabet
    "Alphabet",
    "resolve_alphabet",
    # Entropy
    "calculate_password_entropy",
    "count_valid_passwords",
    # Sampling
    "SecureSampler",
    "ArrayByteSource",
    "DeterministicSource",
    "SystemSource",
    # Generator
    "Password",
    "Token",
    "generate_password",
    "generate_passwords",
    # Health
    "HealthTests",
    # Errors
    "SecurePassError",
    "InvalidLength",
    "EmptyAlphabet",
    "UnsatisfiableRequirement",
    "EntropySourceExhausted",
]
