"""Unsigned 256-bit integers stored as four little-endian 64-bit limbs.

Nothing in here is modular: carries and borrows are handed back to the caller,
who decides whether to reduce.
"""

from typing import Iterable, Tuple, Union

import numpy as np

LIMB_BITS = 64
NUM_LIMBS = 4
LIMB_MASK = (1 << LIMB_BITS) - 1
TOTAL_BITS = LIMB_BITS * NUM_LIMBS


def adc(a: int, b: int, carry: int) -> Tuple[int, int]:
    # a + b + carry -> (low word, carry out)
    t = a + b + carry
    return t & LIMB_MASK, t >> LIMB_BITS


def sbb(a: int, b: int, borrow: int) -> Tuple[int, int]:
    # a - b - borrow -> (low word, borrow out)
    t = a - b - borrow
    return t & LIMB_MASK, int(t < 0)


def mac(acc: int, b: int, c: int, carry: int) -> Tuple[int, int]:
    # acc + b * c + carry always fits in two words
    t = acc + b * c + carry
    return t & LIMB_MASK, t >> LIMB_BITS


def split_limbs(x: int, n: int = NUM_LIMBS) -> list:
    return [(x >> (LIMB_BITS * i)) & LIMB_MASK for i in range(n)]


def join_limbs(limbs: Iterable[int]) -> int:
    return sum(int(w) << (LIMB_BITS * i) for i, w in enumerate(limbs))


class FixedWidthInteger:
    __slots__ = ('limbs',)

    def __init__(self, limbs: Iterable[int] = (0, 0, 0, 0)):
        words = [int(w) for w in limbs]
        if len(words) != NUM_LIMBS:
            raise ValueError(f'expected {NUM_LIMBS} limbs, got {len(words)}')
        if any(w < 0 or w > LIMB_MASK for w in words):
            raise OverflowError(f'limb out of range: {words}')
        self.limbs: np.ndarray = np.array(words, dtype=np.uint64)

    @classmethod
    def from_int(cls, x: int) -> 'FixedWidthInteger':
        if x < 0 or x >> TOTAL_BITS:
            raise OverflowError(f'{x} does not fit in {TOTAL_BITS} bits')
        return cls(split_limbs(x))

    @classmethod
    def coerce(cls, x: Union['FixedWidthInteger', int, Iterable[int]]) -> 'FixedWidthInteger':
        if isinstance(x, cls):
            return x
        if isinstance(x, int):
            return cls.from_int(x)
        return cls(x)

    @classmethod
    def zero(cls) -> 'FixedWidthInteger':
        return cls()

    @classmethod
    def one(cls) -> 'FixedWidthInteger':
        return cls((1, 0, 0, 0))

    def to_int(self) -> int:
        return join_limbs(self.limbs.tolist())

    def __int__(self) -> int:
        return self.to_int()

    def words(self) -> list:
        return self.limbs.tolist()

    def __getitem__(self, i: int) -> int:
        return int(self.limbs[i])

    def __setitem__(self, i: int, value: int):
        if value < 0 or value > LIMB_MASK:
            raise OverflowError(f'limb value {value:#x} does not fit in {LIMB_BITS} bits')
        self.limbs[i] = value

    def __len__(self) -> int:
        return NUM_LIMBS

    def copy(self) -> 'FixedWidthInteger':
        return FixedWidthInteger(self.limbs.tolist())

    def freeze(self) -> 'FixedWidthInteger':
        frozen = self.copy()
        frozen.limbs.setflags(write=False)
        return frozen

    @property
    def is_frozen(self) -> bool:
        return not self.limbs.flags.writeable

    def zeroize(self):
        self.limbs[:] = 0

    def add_with_carry(self, other: 'FixedWidthInteger') -> Tuple['FixedWidthInteger', int]:
        a, b = self.limbs.tolist(), other.limbs.tolist()
        out = [0] * NUM_LIMBS
        carry = 0
        for i in range(NUM_LIMBS):
            out[i], carry = adc(a[i], b[i], carry)
        return FixedWidthInteger(out), carry

    def sub_with_borrow(self, other: 'FixedWidthInteger') -> Tuple['FixedWidthInteger', int]:
        a, b = self.limbs.tolist(), other.limbs.tolist()
        out = [0] * NUM_LIMBS
        borrow = 0
        for i in range(NUM_LIMBS):
            out[i], borrow = sbb(a[i], b[i], borrow)
        return FixedWidthInteger(out), borrow

    def __add__(self, other: 'FixedWidthInteger') -> 'FixedWidthInteger':
        res, carry = self.add_with_carry(other)
        if carry:
            raise OverflowError('256-bit addition overflowed')
        return res

    def __sub__(self, other: 'FixedWidthInteger') -> 'FixedWidthInteger':
        res, borrow = self.sub_with_borrow(other)
        if borrow:
            raise OverflowError('256-bit subtraction underflowed')
        return res

    def compare(self, other: 'FixedWidthInteger') -> int:
        a, b = self.limbs.tolist(), other.limbs.tolist()
        for i in reversed(range(NUM_LIMBS)):
            if a[i] != b[i]:
                return 1 if a[i] > b[i] else -1
        return 0

    def __eq__(self, other):
        if isinstance(other, FixedWidthInteger):
            return bool(np.array_equal(self.limbs, other.limbs))
        if isinstance(other, int):
            return self.to_int() == other
        return NotImplemented

    __hash__ = None

    def __lt__(self, other: 'FixedWidthInteger') -> bool:
        return self.compare(other) < 0

    def __le__(self, other: 'FixedWidthInteger') -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: 'FixedWidthInteger') -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: 'FixedWidthInteger') -> bool:
        return self.compare(other) >= 0

    def bit_length(self) -> int:
        words = self.limbs.tolist()
        for i in reversed(range(NUM_LIMBS)):
            if words[i]:
                return LIMB_BITS * i + words[i].bit_length()
        return 0

    def bit(self, i: int) -> int:
        if not 0 <= i < TOTAL_BITS:
            return 0
        return (int(self.limbs[i // LIMB_BITS]) >> (i % LIMB_BITS)) & 1

    def is_zero(self) -> bool:
        return not self.limbs.any()

    def is_odd(self) -> bool:
        return bool(int(self.limbs[0]) & 1)

    def __repr__(self):
        return f"FixedWidthInteger([{', '.join(f'{w:#018x}' for w in self.limbs.tolist())}])"
