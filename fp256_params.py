"""Constant record for a prime field used with 4x64-bit Montgomery arithmetic.

Every constant is derived from the modulus and the canonical multiplicative
generator. Constants that a caller also declares (for instance ones embedded
in a source table) are compared against the derived ones and any drift is
fatal at construction time.
"""

from dataclasses import dataclass, fields
from typing import Union

from loguru import logger

from fp256_bigint import LIMB_BITS, NUM_LIMBS, TOTAL_BITS, FixedWidthInteger
from fp256_errors import ConstantMismatch, InvalidModulus, InvalidTwoAdicity

# deterministic for every n < 3.3 * 10^24, probabilistic beyond
MILLER_RABIN_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71)


def is_probable_prime(n: int) -> bool:
    if n < 2:
        return False
    for p in MILLER_RABIN_BASES:
        if n % p == 0:
            return n == p
    d, r = n - 1, 0
    while d % 2 == 0:
        d //= 2
        r += 1
    for a in MILLER_RABIN_BASES:
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(r - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def two_adic_split(n: int):
    # n = 2^s * t with t odd
    s = (n & -n).bit_length() - 1
    return s, n >> s


@dataclass(frozen=True, eq=False)
class ModulusParameters:
    modulus: FixedWidthInteger
    num_limbs: int
    modulus_bits: int
    capacity: int
    repr_shave_bits: int
    r: FixedWidthInteger
    r2: FixedWidthInteger
    inv: int
    generator: FixedWidthInteger
    two_adicity: int
    t: FixedWidthInteger
    t_minus_one_div_two: FixedWidthInteger
    modulus_minus_one_div_two: FixedWidthInteger
    two_adic_root_of_unity: FixedWidthInteger

    @classmethod
    def new(cls, modulus: Union[int, FixedWidthInteger], generator: int, /, **declared) -> 'ModulusParameters':
        q = int(modulus)
        if q < 3 or q % 2 == 0:
            raise InvalidModulus(f'{q=} should be odd and at least 3')
        if q >> TOTAL_BITS:
            raise InvalidModulus(f'modulus needs {q.bit_length()} bits but only {NUM_LIMBS} limbs are available')
        if not is_probable_prime(q):
            raise InvalidModulus(f'{q=} is not prime')
        if not 0 < generator < q:
            raise ValueError(f'{generator=} must lie in [1, modulus)')

        bits = q.bit_length()
        r = (1 << TOTAL_BITS) % q
        r2 = r * r % q
        inv = pow(-q, -1, mod=1 << LIMB_BITS)
        assert r * pow(r, -1, q) % q == 1
        assert (q * inv + 1) % (1 << LIMB_BITS) == 0
        logger.debug(f'{bits=} {inv=:0x}')

        s, t = two_adic_split(q - 1)
        root = pow(generator, t, q)
        if pow(root, 1 << (s - 1), q) == 1 or pow(root, 1 << s, q) != 1:
            raise InvalidTwoAdicity(f'{generator=} raised to T does not have order 2^{s}')
        logger.debug(f'two-adicity {s=}, {root=:0x}')

        def fixed(x: int) -> FixedWidthInteger:
            return FixedWidthInteger.from_int(x).freeze()

        params = cls(
            modulus=fixed(q),
            num_limbs=NUM_LIMBS,
            modulus_bits=bits,
            capacity=bits - 1,
            repr_shave_bits=TOTAL_BITS - bits,
            r=fixed(r),
            r2=fixed(r2),
            inv=inv,
            generator=fixed(generator * r % q),
            two_adicity=s,
            t=fixed(t),
            t_minus_one_div_two=fixed((t - 1) // 2),
            modulus_minus_one_div_two=fixed((q - 1) // 2),
            two_adic_root_of_unity=fixed(root * r % q),
        )
        params.check_declared(**declared)
        return params

    def check_declared(self, **declared):
        names = {f.name for f in fields(self)}
        for name, value in declared.items():
            if name not in names:
                raise TypeError(f'unknown modulus parameter {name!r}')
            derived = getattr(self, name)
            if isinstance(derived, FixedWidthInteger):
                value = FixedWidthInteger.coerce(value)
            if value != derived:
                raise ConstantMismatch(name, value, derived)
        if declared:
            logger.debug(f'{len(declared)} declared constants agree with the derived ones')

    @property
    def modulus_int(self) -> int:
        return self.modulus.to_int()
