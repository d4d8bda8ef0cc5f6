"""
SecurePass Errors - Typed failures raised by the core.
"""


class SecurePassError(Exception):
    """Base error for all securepass failures."""
    pass


class InvalidLength(SecurePassError, ValueError):
    """Requested password length is below 1."""
    pass


class EmptyAlphabet(SecurePassError, ValueError):
    """Recipe resolves to an alphabet with no characters."""
    pass


class UnsatisfiableRequirement(SecurePassError, ValueError):
    """Required classes cannot all appear in a password of this recipe."""
    pass


class EntropySourceExhausted(SecurePassError, RuntimeError):
    """Secure random source cannot supply more data. Never retried."""
    pass
