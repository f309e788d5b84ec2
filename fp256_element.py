"""Operator-level prime-field elements on top of a Montgomery engine."""

from typing import Optional, Union

from fp256_bigint import FixedWidthInteger
from fp256_mont import MontgomeryArithmeticEngine


class PrimeFieldElement:
    """Field element holding a Montgomery residue; subclasses bind ``ENGINE``."""

    ENGINE: MontgomeryArithmeticEngine = None
    __slots__ = ('v',)

    def __init__(self, x: int = 0):
        q = type(self).ENGINE.params.modulus_int
        self.v: FixedWidthInteger = type(self).ENGINE.to_montgomery(x % q)

    @classmethod
    def from_montgomery(cls, v: FixedWidthInteger) -> 'PrimeFieldElement':
        el = cls.__new__(cls)
        el.v = v
        return el

    @classmethod
    def zero(cls) -> 'PrimeFieldElement':
        return cls.from_montgomery(cls.ENGINE.zero())

    @classmethod
    def one(cls) -> 'PrimeFieldElement':
        return cls.from_montgomery(cls.ENGINE.one())

    def to_int(self) -> int:
        return type(self).ENGINE.from_montgomery(self.v).to_int()

    def __int__(self) -> int:
        return self.to_int()

    def _c(self, other) -> 'PrimeFieldElement':
        cls = type(self)
        if isinstance(other, cls):
            return other
        if isinstance(other, int):
            return cls(other)
        raise TypeError(f'expected {cls.__name__} or int')

    def _wrap(self, v: FixedWidthInteger) -> 'PrimeFieldElement':
        return type(self).from_montgomery(v)

    def __add__(self, other):
        return self._wrap(self.ENGINE.mod_add(self.v, self._c(other).v))

    __radd__ = __add__

    def __sub__(self, other):
        return self._wrap(self.ENGINE.mod_sub(self.v, self._c(other).v))

    def __rsub__(self, other):
        return self._c(other) - self

    def __mul__(self, other):
        return self._wrap(self.ENGINE.mont_mul(self.v, self._c(other).v))

    __rmul__ = __mul__

    def __truediv__(self, other):
        return self * self._c(other).inverse()

    def __rtruediv__(self, other):
        return self._c(other) * self.inverse()

    def __pow__(self, e: int):
        if e < 0:
            return self.inverse() ** (-e)
        return self._wrap(self.ENGINE.mod_pow(self.v, e))

    def __neg__(self):
        return self._wrap(self.ENGINE.mod_neg(self.v))

    def square(self) -> 'PrimeFieldElement':
        return self._wrap(self.ENGINE.mont_square(self.v))

    def inverse(self) -> 'PrimeFieldElement':
        return self._wrap(self.ENGINE.mod_inverse(self.v))

    def legendre(self) -> int:
        return self.ENGINE.legendre(self.v)

    def sqrt(self) -> Optional['PrimeFieldElement']:
        root = self.ENGINE.sqrt(self.v)
        return None if root is None else self._wrap(root)

    def __eq__(self, other: Union['PrimeFieldElement', int]):
        if isinstance(other, type(self)):
            return self.v == other.v
        if isinstance(other, int):
            return self.to_int() == other % self.ENGINE.params.modulus_int
        return NotImplemented

    def __hash__(self):
        return hash(self.to_int())

    def __bool__(self):
        return not self.v.is_zero()

    def __repr__(self):
        return f'{type(self).__name__}({self.to_int()})'
