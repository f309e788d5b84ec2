"""Two-adic root-of-unity tower used by radix-2 FFT domains.

Entry i of a tower built from ``root`` is ``root^(2^i)`` and has
multiplicative order exactly ``2^(s - i)``.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np
from loguru import logger

from fp256_bigint import NUM_LIMBS, FixedWidthInteger
from fp256_errors import ConstantMismatch, InvalidTwoAdicity
from fp256_mont import Exponent, MontgomeryArithmeticEngine
from fp256_params import ModulusParameters, two_adic_split


@dataclass(frozen=True, eq=False)
class RootOfUnityTower:
    two_adicity: int
    entries: np.ndarray  # (s - 1, NUM_LIMBS) uint64, Montgomery form

    def __post_init__(self):
        if self.entries.shape != (self.two_adicity - 1, NUM_LIMBS):
            raise ValueError(f'tower shape {self.entries.shape} does not match two-adicity {self.two_adicity}')
        self.entries.setflags(write=False)

    @classmethod
    def from_elements(cls, two_adicity: int, elements: Sequence[FixedWidthInteger]) -> 'RootOfUnityTower':
        entries = np.array([e.words() for e in elements], dtype=np.uint64).reshape(-1, NUM_LIMBS)
        return cls(two_adicity=two_adicity, entries=entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, i: int) -> FixedWidthInteger:
        return FixedWidthInteger(self.entries[i].tolist()).freeze()

    def __iter__(self) -> Iterator[FixedWidthInteger]:
        for i in range(len(self)):
            yield self[i]

    def canonical(self, engine: MontgomeryArithmeticEngine) -> np.ndarray:
        return np.array([engine.from_montgomery(e).words() for e in self], dtype=np.uint64).reshape(-1, NUM_LIMBS)

    def root_of_unity(self, engine: MontgomeryArithmeticEngine, log_n: int) -> FixedWidthInteger:
        """Element of order exactly 2^log_n, in Montgomery form."""
        s = self.two_adicity
        if not 0 <= log_n <= s:
            raise ValueError(f'no subgroup of order 2^{log_n} in a field of two-adicity {s}')
        if log_n == 0:
            return engine.one()
        if log_n == 1:
            return engine.mod_neg(engine.one())
        return self[s - log_n]


def _order_is(engine: MontgomeryArithmeticEngine, x: FixedWidthInteger, log_order: int) -> bool:
    # x^(2^(k-1)) != 1 and x^(2^k) == 1
    for _ in range(log_order - 1):
        x = engine.mont_square(x)
    if engine.is_one(x):
        return False
    return engine.is_one(engine.mont_square(x))


def build_tower(engine: MontgomeryArithmeticEngine, base: FixedWidthInteger, t: Exponent, s: int) -> RootOfUnityTower:
    root = engine.mod_pow(base, t)
    if not _order_is(engine, root, s):
        raise InvalidTwoAdicity(f'{root!r} does not have order 2^{s}')

    elements = []
    x = root
    for _ in range(s - 1):
        elements.append(x)
        x = engine.mont_square(x)
    logger.debug(f'built root-of-unity tower with {len(elements)} entries')
    return RootOfUnityTower.from_elements(s, elements)


def validate_tower(engine: MontgomeryArithmeticEngine, tower: RootOfUnityTower):
    s = tower.two_adicity
    for i, entry in enumerate(tower):
        if not _order_is(engine, entry, s - i):
            raise InvalidTwoAdicity(f'tower entry {i} does not have order 2^{s - i}')


def validate_two_adicity(params: ModulusParameters):
    s, t = two_adic_split(params.modulus_int - 1)
    if s != params.two_adicity or t != params.t.to_int():
        raise InvalidTwoAdicity(f'modulus - 1 = 2^{s} * {t}, not 2^{params.two_adicity} * {params.t.to_int()}')


def verify_published(engine: MontgomeryArithmeticEngine, params: ModulusParameters,
                     published: Sequence[Sequence[int]]) -> RootOfUnityTower:
    """Recompute the tower and compare it limb-for-limb with a published table.

    Published tables list ``(TWO_ADIC_ROOT_OF_UNITY^T)^(2^i)`` in canonical
    (non-Montgomery) form.
    """
    validate_two_adicity(params)
    tower = build_tower(engine, params.two_adic_root_of_unity, params.t, params.two_adicity)
    validate_tower(engine, tower)

    expected = np.array(published, dtype=np.uint64).reshape(-1, NUM_LIMBS)
    if expected.shape != tower.entries.shape:
        raise ConstantMismatch('POWERS_OF_G', f'{len(expected)} entries', f'{len(tower)} entries')
    computed = tower.canonical(engine)
    mismatched = np.flatnonzero((computed != expected).any(axis=1))
    if mismatched.size:
        i = int(mismatched[0])
        raise ConstantMismatch(f'POWERS_OF_G[{i}]', expected[i].tolist(), computed[i].tolist())
    logger.debug(f'published tower of {len(tower)} entries verified')
    return tower
