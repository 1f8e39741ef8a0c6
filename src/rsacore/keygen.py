"""Core Key Generation Utility, mainly focusing on the generation of random large primes.

This module is responsible for generating RSA key pairs, loosely following FIPS 186-5 for probable primes. Every
search loop is bounded so a broken random source surfaces as an error instead of hanging the caller.

Typical usage example:

    public, private = generate(2048)
    p, q = generate_primes(2048)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
from typing import Literal, NamedTuple, overload

from rsacore.arith import extended_gcd
from rsacore.arith import is_probably_prime
from rsacore.arith import mod_inverse
from rsacore.arith import random_odd_in_bit_range
from rsacore.arith import RandomSource
from rsacore.errors import KeyGenerationExhausted

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_EXPONENT: int = 65537
MINIMUM_KEY_SIZE: int = 512
COPRIME_RETRIES: int = 16
_MINIMUM_PRIME_SEPARATION: int = 100


class PublicKey(NamedTuple):
    """Public half of a key pair: (e, n)."""
    e: int
    n: int


class PrivateKey(NamedTuple):
    """Private half of a key pair: (d, n)."""
    d: int
    n: int


def _generate_probable_prime(size: int, rng: RandomSource | None = None, prm_p: int | None = None) -> int:
    """Generate a probable prime number of the specified bit size.

    A multi-use function for both p and q. Candidates get their two top bits set, so the product of any two of them
    has exactly `2 * size` bits.

    Args:
        size: The size of the prime to generate in bits.
        rng: Source of randomness. Defaults to the system CSPRNG.
        prm_p: The other prime in the pair if this is the second generation. Candidates too close to it are skipped.
            Optional, if not provided generates 1st prime.

    Returns:
        A probable prime number.

    Raises:
        KeyGenerationExhausted: If generation loops way beyond a reasonable time and a bit.
    """
    ml = 1 if prm_p is None else 2
    rep_cap = size * 5 * ml
    separation = 1 << max(size - _MINIMUM_PRIME_SEPARATION, 0)
    for _ in range(rep_cap):
        candidate = random_odd_in_bit_range(size, rng) | (1 << (size - 2))
        if prm_p is not None and abs(prm_p - candidate) <= separation:
            continue
        if is_probably_prime(candidate, rng=rng):
            return candidate
    raise KeyGenerationExhausted(
        f"Ran an improbable {rep_cap} amount of loops with no prime found. Check the random number generator.")


def _validate(size: int, pub: int) -> None:
    if size < MINIMUM_KEY_SIZE:
        raise ValueError(f"Size must be at least {MINIMUM_KEY_SIZE}.")
    if pub % 2 == 0 or pub <= 1:
        raise ValueError("Public exponent must be odd and greater than 1.")


def generate_primes(size: int,
                    pub: int = DEFAULT_PUBLIC_EXPONENT,
                    rng: RandomSource | None = None) -> tuple[int, int]:
    """Generates a pair of distinct primes suitable for the given public exponent.

    Args:
        size: The key size to generate the prime pair for. Must be at least `MINIMUM_KEY_SIZE`.
            Odd sizes give p one bit more than q.
        pub: The public exponent the pair must support. Defaults (and recommended) to 65537.
        rng: Source of randomness. Defaults to the system CSPRNG.

    Returns:
        Primes (p, q) with p != q, p*q of exactly `size` bits and gcd(pub, (p-1)*(q-1)) == 1.

    Raises:
        ValueError: If `size` or `pub` do not meet requirements.
        KeyGenerationExhausted: If no coprime pair was found within `COPRIME_RETRIES` attempts.
    """
    _validate(size, pub)
    for attempt in range(COPRIME_RETRIES):
        p = _generate_probable_prime(size - size // 2, rng)
        q = _generate_probable_prime(size // 2, rng, p)
        phi = (p - 1) * (q - 1)
        if pub < phi and extended_gcd(pub, phi)[0] == 1:
            return p, q
        logger.debug("Public exponent not coprime to phi on attempt %d, resampling primes.", attempt + 1)
    raise KeyGenerationExhausted(f"No prime pair coprime to {pub} found in {COPRIME_RETRIES} attempts.")


@overload
def generate_key_pair(size: int,
                      pub: int = DEFAULT_PUBLIC_EXPONENT,
                      expose_primes: Literal[False] = False,
                      rng: RandomSource | None = None) -> tuple[PublicKey, PrivateKey]:
    ...


@overload
def generate_key_pair(size: int,
                      pub: int = DEFAULT_PUBLIC_EXPONENT,
                      expose_primes: Literal[True] = True,
                      rng: RandomSource | None = None) -> tuple[PublicKey, PrivateKey, tuple[int, int]]:
    ...


def generate_key_pair(
    size: int,
    pub: int = DEFAULT_PUBLIC_EXPONENT,
    expose_primes: bool = False,
    rng: RandomSource | None = None,
) -> tuple[PublicKey, PrivateKey] | tuple[PublicKey, PrivateKey, tuple[int, int]]:
    """Generates an RSA key pair.

    Fully generates a valid RSA Key, with d the inverse of the public exponent modulo (p-1)*(q-1).

    Args:
        size: The key size to generate. Must be at least `MINIMUM_KEY_SIZE`.
        pub: The public exponent. Defaults (and recommended) to 65537.
        expose_primes: Whether to return the prime numbers as well or not. Defaults to False.
            Provides CRT acceleration for decryption if used correctly.
        rng: Source of randomness. Defaults to the system CSPRNG.

    Returns:
        A (public, private) tuple, or (public, private, (p, q)) if primes are exposed.
    """
    p, q = generate_primes(size, pub, rng)
    n = p * q
    d = mod_inverse(pub, (p - 1) * (q - 1))
    public, private = PublicKey(pub, n), PrivateKey(d, n)
    if not expose_primes:
        del p, q
        return public, private
    return public, private, (p, q)


def generate(bits: int,
             pub_exp: int = DEFAULT_PUBLIC_EXPONENT,
             rng: RandomSource | None = None) -> tuple[PublicKey, PrivateKey]:
    """Returns a fresh (public, private) key pair of `bits` bits."""
    return generate_key_pair(bits, pub_exp, False, rng)
