"""Error taxonomy for the RSA core.

Every failure raised by the arithmetic, key generation and cipher layers derives from `RSACoreError`, while also
subclassing the builtin exception a caller would naturally expect (`ValueError`, `ArithmeticError`, `RuntimeError`).
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSACoreError(Exception):
    """Base class for all errors raised by rsacore."""


class InvalidModulus(RSACoreError, ValueError):
    """A modulus of zero or below was passed to a modular operation."""


class NoInverseExists(RSACoreError, ArithmeticError):
    """The requested modular inverse does not exist, as gcd(a, m) != 1."""


class KeyGenerationExhausted(RSACoreError, RuntimeError):
    """The bounded prime search or coprimality retry loop ran out of attempts."""


class MessageTooLarge(RSACoreError, ValueError):
    """The encoded message integer is not smaller than the modulus."""


class CiphertextOutOfRange(RSACoreError, ValueError):
    """The ciphertext integer lies outside of [0, n-1]."""
