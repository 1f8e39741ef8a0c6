"""Arbitrary-precision arithmetic primitives backing the RSA core.

Python integers already provide unbounded magnitude and the base operations. Everything with actual algorithmic
content, modular exponentiation, the Extended Euclidean Algorithm and Miller-Rabin, is implemented here rather than
delegated to `pow()` or an external crypto library.

Typical usage example:

    modpow(4, 13, 497)
    mod_inverse(3, 11)
    is_probably_prime(7919)
    random_odd_in_bit_range(1024)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import secrets
from typing import Protocol

from rsacore.errors import InvalidModulus
from rsacore.errors import NoInverseExists

SMALL_PRIME_BOUND: int = 10000

# (cap, primes up to cap), rebound as one value.
_SMALL_PRIMES: tuple[int, list[int]] = (0, [])


class RandomSource(Protocol):
    """The narrow slice of `random.Random` the core draws randomness from.

    Satisfied by both `secrets.SystemRandom` (the default) and a seeded `random.Random` for reproducible tests.
    """

    def randbits(self, k: int) -> int:
        ...

    def randrange(self, start: int, stop: int) -> int:
        ...


_SYSTEM_RANDOM: RandomSource = secrets.SystemRandom()


def modpow(base: int, exponent: int, modulus: int) -> int:
    """Computes `base**exponent mod modulus` by binary square-and-multiply.

    The running base is squared once per exponent bit and multiplied into the accumulator wherever the bit is set,
    reducing after every multiplication so intermediates never exceed `modulus**2`.

    Args:
        base: The base, any non-negative integer.
        exponent: The exponent. Must be >= 0.
        modulus: The modulus. Must be > 0.

    Returns:
        The modular power, in range [0, modulus-1].

    Raises:
        InvalidModulus: If `modulus` <= 0.
        ValueError: If `exponent` is negative.
    """
    if modulus <= 0:
        raise InvalidModulus("Modulus must be a positive integer")
    if exponent < 0:
        raise ValueError("Exponent must be non-negative")
    if modulus == 1:
        return 0
    result = 1
    base %= modulus
    while exponent:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1
    return result


def extended_gcd(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*x + b*y = g = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of two integers, as well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def mod_inverse(a: int, m: int) -> int:
    """Computes the modular inverse of `a` modulo `m` through `extended_gcd`.

    Args:
        a: The value to invert.
        m: The modulus. Must be > 0.

    Returns:
        The unique d in range [0, m-1] such that a*d = 1 (mod m).

    Raises:
        InvalidModulus: If `m` <= 0.
        NoInverseExists: If gcd(a, m) != 1.
    """
    if m <= 0:
        raise InvalidModulus("Modulus must be a positive integer")
    g, x, _ = extended_gcd(a % m, m)
    if g != 1:
        raise NoInverseExists(f"No inverse of {a} modulo {m}, gcd is {g}")
    return x % m


def _sieve(n: int = SMALL_PRIME_BOUND) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes over odd numbers only, sieving until root.

    Args:
        n: The number up to which to generate primes. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = SMALL_PRIME_BOUND) -> list[int]:
    """Get the small primes, sieving only when the cached range is too short.

    The cache pairs the sieved bound with its primes and is rebound in one assignment, so readers never see a list
    that does not match its bound.

    Args:
        n: The number up to which primes are required. Must be >= 0.

    Returns:
        List of primes in ascending order, covering at least everything up to `n`.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    cap, primes = _SMALL_PRIMES
    if n > cap or not primes:
        primes = _sieve(n)
        _SMALL_PRIMES = (n, primes)
    return primes


def _trial_division(no: int, n: int = SMALL_PRIME_BOUND) -> bool:
    """Checks `no` against the known small primes before any Miller-Rabin round is spent.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime * prime > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int, rng: RandomSource | None = None) -> bool:
    """Perform Miller-Rabin primality test.

    Performs the Miller-Rabin primality test as specified in FIPS 186-5, with witnesses drawn uniformly from
    [2, w-2].

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.
        rng: Source of the random witnesses.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    rng = rng or _SYSTEM_RANDOM
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = rng.randrange(2, w - 1)
        z = modpow(b, m, w)
        if z == 1 or z == tw:
            continue
        for _ in range(1, a):
            z = modpow(z, 2, w)
            if z == tw:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def _default_rounds(bits: int) -> int:
    # FIPS 186-5 Appendix C.1
    if bits <= 512:
        return 40
    if bits <= 1024:
        return 56
    if bits <= 1536:
        return 64
    if bits <= 2048:
        return 70
    return 74


def is_probably_prime(n: int, rounds: int | None = None, rng: RandomSource | None = None) -> bool:
    """Composite primality test: trial division by small primes, then Miller-Rabin.

    True primes always pass. A composite survives with probability at most 4**-rounds.

    Args:
        n: The candidate to test.
        rounds: Number of Miller-Rabin witnesses.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        rng: Source of the random witnesses. Defaults to the system CSPRNG.

    Returns:
        True if `n` is probably prime, False otherwise.
    """
    if n < 2:
        return False
    if n in (2, 3):
        return True
    if n % 2 == 0:
        return False
    if not _trial_division(n):
        return False
    if rounds is None:
        rounds = _default_rounds(n.bit_length())
    return _miller_rabin(n, rounds, rng)


def random_odd_in_bit_range(bits: int, rng: RandomSource | None = None) -> int:
    """Draws a uniformly distributed odd integer of exactly `bits` significant bits.

    Args:
        bits: The bit length of the result. Must be >= 2.
        rng: Source of randomness. Defaults to the system CSPRNG.

    Returns:
        An odd integer in range [2**(bits-1), 2**bits - 1].

    Raises:
        ValueError: If `bits` < 2.
    """
    if bits < 2:
        raise ValueError("An odd number with its top bit set needs at least 2 bits")
    rng = rng or _SYSTEM_RANDOM
    # Top bit for length, bottom bit for oddness.
    return rng.randbits(bits) | (1 << (bits - 1)) | 1
