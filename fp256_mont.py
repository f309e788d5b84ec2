"""Montgomery arithmetic over four 64-bit limbs.

Every operand and result is a FixedWidthInteger already reduced to
[0, modulus). Range is not checked per call; callers that build values from
untrusted input go through ``to_montgomery`` or their own validation first.
"""

from typing import Iterable, List, Optional, Sequence, Union

from loguru import logger

from fp256_bigint import LIMB_BITS, LIMB_MASK, NUM_LIMBS, FixedWidthInteger, adc, mac, sbb, split_limbs
from fp256_errors import NotInvertible
from fp256_params import ModulusParameters

Exponent = Union[FixedWidthInteger, int, Sequence[int]]


class MontgomeryArithmeticEngine:
    def __init__(self, params: ModulusParameters):
        self.params: ModulusParameters = params
        self.n: int = params.num_limbs
        self.m: List[int] = params.modulus.words()
        self.inv: int = params.inv
        self._one: List[int] = params.r.words()
        self._r2: List[int] = params.r2.words()
        q = params.modulus_int
        self._q_minus_two: List[int] = split_limbs(q - 2)
        logger.debug(f'engine for {q=:0x}, {self.inv=:0x}')

    # -- limb-list kernels --------------------------------------------------

    def _sub_modulus(self, x: List[int], top: int) -> List[int]:
        # x + top * 2^256 < 2 * modulus; subtract once if it is >= modulus
        d = [0] * self.n
        borrow = 0
        for i in range(self.n):
            d[i], borrow = sbb(x[i], self.m[i], borrow)
        return d if top or not borrow else x

    def _mul(self, a: List[int], b: List[int]) -> List[int]:
        # CIOS: interleave one row of a * b[i] with one reduction step
        n, m, inv = self.n, self.m, self.inv
        t = [0] * (n + 2)
        for i in range(n):
            carry = 0
            for j in range(n):
                t[j], carry = mac(t[j], a[j], b[i], carry)
            t[n], t[n + 1] = adc(t[n], carry, 0)

            k = (t[0] * inv) & LIMB_MASK
            _, carry = mac(t[0], k, m[0], 0)
            for j in range(1, n):
                t[j - 1], carry = mac(t[j], k, m[j], carry)
            t[n - 1], carry = adc(t[n], carry, 0)
            t[n] = t[n + 1] + carry
        return self._sub_modulus(t[:n], t[n])

    def _square(self, a: List[int]) -> List[int]:
        n, m, inv = self.n, self.m, self.inv
        r = [0] * (2 * n)
        # off-diagonal products, then doubled
        for i in range(n - 1):
            carry = 0
            for j in range(i + 1, n):
                r[i + j], carry = mac(r[i + j], a[i], a[j], carry)
            r[i + n] = carry
        for i in reversed(range(1, 2 * n)):
            r[i] = ((r[i] << 1) & LIMB_MASK) | (r[i - 1] >> (LIMB_BITS - 1))
        r[0] = (r[0] << 1) & LIMB_MASK

        carry = 0
        for i in range(n):
            r[2 * i], carry = mac(r[2 * i], a[i], a[i], carry)
            r[2 * i + 1], carry = adc(r[2 * i + 1], 0, carry)
        assert carry == 0

        # reduce the 2n-limb product
        carry2 = 0
        for i in range(n):
            k = (r[i] * inv) & LIMB_MASK
            _, carry = mac(r[i], k, m[0], 0)
            for j in range(1, n):
                r[i + j], carry = mac(r[i + j], k, m[j], carry)
            r[i + n], carry2 = adc(r[i + n], carry, carry2)
        return self._sub_modulus(r[n:], carry2)

    def _pow(self, base: List[int], exponent: List[int]) -> List[int]:
        res = self._one
        found_one = False
        for word in reversed(exponent):
            for i in reversed(range(LIMB_BITS)):
                bit = (word >> i) & 1
                if found_one:
                    res = self._square(res)
                if bit:
                    found_one = True
                    res = self._mul(res, base)
        return res

    @staticmethod
    def _exponent_words(exponent: Exponent) -> List[int]:
        if isinstance(exponent, FixedWidthInteger):
            return exponent.words()
        if isinstance(exponent, int):
            if exponent < 0:
                raise ValueError(f'{exponent=} must be non-negative')
            return split_limbs(exponent, max(1, -(-exponent.bit_length() // LIMB_BITS)))
        words = [int(w) for w in exponent]
        if any(w < 0 or w > LIMB_MASK for w in words):
            raise OverflowError('exponent limbs must fit in 64 bits')
        return words

    # -- public API ------------------------------------------------------------

    def zero(self) -> FixedWidthInteger:
        return FixedWidthInteger.zero()

    def one(self) -> FixedWidthInteger:
        return FixedWidthInteger(self._one)

    def is_one(self, a: FixedWidthInteger) -> bool:
        return a.words() == self._one

    def to_montgomery(self, x: Union[FixedWidthInteger, int]) -> FixedWidthInteger:
        x = FixedWidthInteger.coerce(x)
        return FixedWidthInteger(self._mul(x.words(), self._r2))

    def from_montgomery(self, x: FixedWidthInteger) -> FixedWidthInteger:
        return FixedWidthInteger(self._mul(x.words(), [1] + [0] * (self.n - 1)))

    def mont_mul(self, a: FixedWidthInteger, b: FixedWidthInteger) -> FixedWidthInteger:
        return FixedWidthInteger(self._mul(a.words(), b.words()))

    def mont_square(self, a: FixedWidthInteger) -> FixedWidthInteger:
        return FixedWidthInteger(self._square(a.words()))

    def mod_add(self, a: FixedWidthInteger, b: FixedWidthInteger) -> FixedWidthInteger:
        x, y = a.words(), b.words()
        s = [0] * self.n
        carry = 0
        for i in range(self.n):
            s[i], carry = adc(x[i], y[i], carry)
        return FixedWidthInteger(self._sub_modulus(s, carry))

    def mod_double(self, a: FixedWidthInteger) -> FixedWidthInteger:
        return self.mod_add(a, a)

    def mod_sub(self, a: FixedWidthInteger, b: FixedWidthInteger) -> FixedWidthInteger:
        x, y = a.words(), b.words()
        d = [0] * self.n
        borrow = 0
        for i in range(self.n):
            d[i], borrow = sbb(x[i], y[i], borrow)
        e = [0] * self.n
        carry = 0
        for i in range(self.n):
            e[i], carry = adc(d[i], self.m[i], carry)
        return FixedWidthInteger(e if borrow else d)

    def mod_neg(self, a: FixedWidthInteger) -> FixedWidthInteger:
        x = a.words()
        d = [0] * self.n
        borrow = 0
        for i in range(self.n):
            d[i], borrow = sbb(self.m[i], x[i], borrow)
        return FixedWidthInteger(d if any(x) else x)

    def mod_pow(self, base: FixedWidthInteger, exponent: Exponent) -> FixedWidthInteger:
        return FixedWidthInteger(self._pow(base.words(), self._exponent_words(exponent)))

    def mod_inverse(self, a: FixedWidthInteger) -> FixedWidthInteger:
        # a^(q-2) is computed whether or not a is zero
        res = FixedWidthInteger(self._pow(a.words(), self._q_minus_two))
        if res.is_zero():
            raise NotInvertible('cannot invert zero')
        return res

    def batch_inverse(self, values: Iterable[FixedWidthInteger]) -> List[FixedWidthInteger]:
        values = [v.words() for v in values]
        prefix = []
        acc = self._one
        for v in values:
            if not any(v):
                raise NotInvertible('cannot invert zero')
            prefix.append(acc)
            acc = self._mul(acc, v)
        inv = self.mod_inverse(FixedWidthInteger(acc)).words()
        out = [None] * len(values)
        for i in reversed(range(len(values))):
            out[i] = FixedWidthInteger(self._mul(inv, prefix[i]))
            inv = self._mul(inv, values[i])
        return out

    def legendre(self, a: FixedWidthInteger) -> int:
        # Euler's criterion: 0, 1 for a nonzero square, -1 otherwise
        s = self._pow(a.words(), self.params.modulus_minus_one_div_two.words())
        if not any(s):
            return 0
        return 1 if s == self._one else -1

    def sqrt(self, a: FixedWidthInteger) -> Optional[FixedWidthInteger]:
        """Tonelli-Shanks square root in Montgomery form.

        Returns None when ``a`` is not a quadratic residue. Either root may be
        returned; the other is its negation.
        """
        if a.is_zero():
            return self.zero()
        if self.legendre(a) == -1:
            return None

        z = self.params.two_adic_root_of_unity.words()
        w = self._pow(a.words(), self.params.t_minus_one_div_two.words())
        x = self._mul(w, a.words())
        b = self._mul(x, w)
        v = self.params.two_adicity

        while b != self._one:
            k = 0
            b2k = b
            while b2k != self._one:
                b2k = self._square(b2k)
                k += 1
            assert k < v
            w = z
            for _ in range(v - k - 1):
                w = self._square(w)
            z = self._square(w)
            b = self._mul(b, z)
            x = self._mul(x, w)
            v = k
        return FixedWidthInteger(x)

    def reference_mont_mul(self, x: int, y: int) -> int:
        # word-serial Montgomery multiplication over Python integers
        q = self.params.modulus_int
        assert 0 <= x < q and 0 <= y < q
        word = 1 << LIMB_BITS

        z = 0
        for i in range(NUM_LIMBS):
            z = z + ((y >> (LIMB_BITS * i)) & LIMB_MASK) * x
            k = (z * self.inv) % word
            z = z + k * q
            assert z % word == 0
            z = z // word

        if z >= q:
            z -= q
        return z
