"""Textbook RSA built directly on arbitrary-precision integers.

Provides key-pair generation, deterministic unpadded encryption and decryption, and the arithmetic underneath them:
square-and-multiply modular exponentiation, the Extended Euclidean Algorithm and Miller-Rabin primality testing.
Keys are plain (exponent, modulus) pairs, with PEM and JSON import/export helpers around them.

Typical usage example:

    public, private = generate(2048)
    c = encrypt(public, b"Hi there!")
    r = decrypt(private, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsacore.arith import extended_gcd
from rsacore.arith import is_probably_prime
from rsacore.arith import mod_inverse
from rsacore.arith import modpow
from rsacore.arith import random_odd_in_bit_range
from rsacore.errors import CiphertextOutOfRange
from rsacore.errors import InvalidModulus
from rsacore.errors import KeyGenerationExhausted
from rsacore.errors import MessageTooLarge
from rsacore.errors import NoInverseExists
from rsacore.errors import RSACoreError
from rsacore.keygen import generate
from rsacore.keygen import generate_key_pair
from rsacore.keygen import generate_primes
from rsacore.keygen import PrivateKey
from rsacore.keygen import PublicKey
from rsacore.rsa import decrypt
from rsacore.rsa import encrypt
from rsacore.rsa import RSAPrivKey
from rsacore.rsa import RSAPubKey

__version__ = "0.1.0"
__all__ = [
    "RSAPrivKey",
    "RSAPubKey",
    "PublicKey",
    "PrivateKey",
    "generate",
    "generate_key_pair",
    "generate_primes",
    "encrypt",
    "decrypt",
    "modpow",
    "extended_gcd",
    "mod_inverse",
    "is_probably_prime",
    "random_odd_in_bit_range",
    "RSACoreError",
    "InvalidModulus",
    "NoInverseExists",
    "KeyGenerationExhausted",
    "MessageTooLarge",
    "CiphertextOutOfRange",
]
