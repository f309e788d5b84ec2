#!/usr/bin/env python3
"""Offline generator for the constant tables embedded in ``bls12_377_fr``.

Given a prime modulus and the factorisation of the odd part of q - 1, derives
every Montgomery and FFT constant the same way the published tables were
derived (smallest multiplicative generator, two-adic root, root powers) and
either prints them as Python source or compares them with the checked-in
tables.

    fp256-gen --check
    fp256-gen --modulus <q> --factors 3,5,7,13,499,958612291309063373,9586122913090633729^2
"""

import random
import sys
from argparse import ArgumentParser
from typing import Callable, Dict, List, Sequence, Tuple

import colorama
import numpy as np
from loguru import logger

import bls12_377_fr
from fp256_bigint import LIMB_BITS, NUM_LIMBS, TOTAL_BITS, FixedWidthInteger, split_limbs
from fp256_mont import MontgomeryArithmeticEngine
from fp256_params import ModulusParameters, is_probable_prime, two_adic_split

Factors = Sequence[Tuple[int, int]]

TABLE_NAMES = (
    'MODULUS', 'MODULUS_BITS', 'CAPACITY', 'REPR_SHAVE_BITS', 'R', 'R2', 'INV',
    'GENERATOR_INT', 'GENERATOR', 'TWO_ADICITY', 'T', 'T_MINUS_ONE_DIV_TWO',
    'MODULUS_MINUS_ONE_DIV_TWO', 'TWO_ADIC_ROOT_OF_UNITY', 'POWERS_OF_G',
)


def limbs(x: int) -> Tuple[int, ...]:
    return tuple(split_limbs(x, NUM_LIMBS))


def parse_factors(text: str) -> List[Tuple[int, int]]:
    out = []
    for part in text.split(','):
        p, _, e = part.strip().partition('^')
        out.append((int(p), int(e) if e else 1))
    return out


def check_factorization(q: int, factors: Factors):
    s, t = two_adic_split(q - 1)
    prod = 1
    for p, e in factors:
        if p == 2 or not is_probable_prime(p):
            raise ValueError(f'{p} is not an odd prime')
        prod *= p ** e
    if prod != t:
        raise ValueError(f'factors multiply to {prod}, expected {t=}')


def find_generator(q: int, factors: Factors) -> int:
    primes = [2] + [p for p, _ in factors]
    g = 2
    while any(pow(g, (q - 1) // p, q) == 1 for p in primes):
        g += 1
    logger.debug(f'smallest generator of F_q^* is {g}')
    return g


def derive_constants(q: int, factors: Factors) -> Dict[str, object]:
    check_factorization(q, factors)
    bits = q.bit_length()
    r = (1 << TOTAL_BITS) % q
    s, t = two_adic_split(q - 1)
    g = find_generator(q, factors)
    root = pow(g, t, q)
    assert pow(root, 1 << (s - 1), q) != 1 and pow(root, 1 << s, q) == 1

    powers = []
    x = pow(root, t, q)
    for _ in range(s - 1):
        powers.append(limbs(x))
        x = x * x % q
    logger.info(f'derived constants for {q=:0x}, {s=}, generator={g}')

    return {
        'MODULUS': limbs(q),
        'MODULUS_BITS': bits,
        'CAPACITY': bits - 1,
        'REPR_SHAVE_BITS': TOTAL_BITS - bits,
        'R': limbs(r),
        'R2': limbs(r * r % q),
        'INV': pow(-q, -1, mod=1 << LIMB_BITS),
        'GENERATOR_INT': g,
        'GENERATOR': limbs(g * r % q),
        'TWO_ADICITY': s,
        'T': limbs(t),
        'T_MINUS_ONE_DIV_TWO': limbs((t - 1) // 2),
        'MODULUS_MINUS_ONE_DIV_TWO': limbs((q - 1) // 2),
        'TWO_ADIC_ROOT_OF_UNITY': limbs(root * r % q),
        'POWERS_OF_G': tuple(powers),
    }


def checked_in_constants(module=bls12_377_fr) -> Dict[str, object]:
    return {name: getattr(module, name) for name in TABLE_NAMES}


def diff_constants(computed: Dict[str, object], checked_in: Dict[str, object]) -> List[str]:
    return [name for name in TABLE_NAMES
            if np.asarray(computed[name], dtype=object).tolist() != np.asarray(checked_in[name], dtype=object).tolist()]


def render_constants(constants: Dict[str, object]) -> str:
    lines = []
    for name in TABLE_NAMES:
        value = constants[name]
        if name == 'POWERS_OF_G':
            lines.append(f'{name} = (')
            lines.extend(f'    ({", ".join(str(w) for w in row)}),' for row in value)
            lines.append(')')
        elif isinstance(value, tuple):
            lines.append(f'{name} = ({", ".join(str(w) for w in value)})')
        else:
            lines.append(f'{name} = {value}')
    return '\n'.join(lines) + '\n'


def highlight_words(computed: Sequence[int], expected: Sequence[int]) -> Tuple[str, str]:
    computed_str_builder = []
    expected_str_builder = []
    for computed_word, expected_word in zip(computed, expected):
        if computed_word != expected_word:
            computed_str_builder.append(f'{colorama.Fore.RED}{computed_word:016X}{colorama.Fore.RESET}')
            expected_str_builder.append(f'{colorama.Fore.RED}{expected_word:016X}{colorama.Fore.RESET}')
        else:
            computed_str_builder.append(f'{computed_word:016X}')
            expected_str_builder.append(f'{expected_word:016X}')
    return ' '.join(computed_str_builder), ' '.join(expected_str_builder)


def report_mismatches(computed: Dict[str, object], checked_in: Dict[str, object], names: Sequence[str]):
    for name in names:
        got, want = computed[name], checked_in[name]
        if isinstance(got, int):
            logger.error(f'{name}: computed {got}, checked in {want}')
            continue
        rows = list(zip(got, want)) if name == 'POWERS_OF_G' else [(got, want)]
        for i, (g, w) in enumerate(rows):
            if tuple(g) != tuple(w):
                c, e = highlight_words(g, w)
                logger.error(f'{name}[{i}] computed:   {c}')
                logger.error(f'{name}[{i}] checked in: {e}')


def random_int_with_filter(k: int, filter: Callable[[int], bool]):
    while True:
        r = random.randrange(2 ** k)
        if filter(r):
            return r


def cross_check(engine: MontgomeryArithmeticEngine, samples: int) -> int:
    """Compare limb-level mont_mul with the word-serial reference; returns failures."""
    q = engine.params.modulus_int
    r_inv = pow(1 << TOTAL_BITS, -1, q)
    failures = 0
    for _ in range(samples):
        x = random_int_with_filter(q.bit_length(), lambda v: v < q)
        y = random_int_with_filter(q.bit_length(), lambda v: v < q)
        expected = x * y * r_inv % q
        res = engine.mont_mul(FixedWidthInteger.from_int(x), FixedWidthInteger.from_int(y)).to_int()
        ref = engine.reference_mont_mul(x, y)
        if res != expected or ref != expected:
            logger.error(f'{x=:x} {y=:x}: {res=:x} {ref=:x} {expected=:x}')
            failures += 1
    logger.info(f'{samples - failures}/{samples} mont_mul samples agree')
    return failures


def main(argv=None) -> int:
    parser = ArgumentParser(description='derive Montgomery/FFT constants for a 4x64-bit prime field')
    parser.add_argument('--debug', action='store_true')
    parser.add_argument('--modulus', type=int, default=bls12_377_fr.MODULUS_INT)
    parser.add_argument('--factors', type=parse_factors, default=None,
                        help='odd prime factors of q - 1 as p[^e],p[^e],...')
    parser.add_argument('--check', action='store_true', help='compare with the checked-in bls12_377_fr tables')
    parser.add_argument('--samples', type=int, default=0, help='random mont_mul cross-checks to run')
    parser.add_argument('--seed', type=int, default=None)
    args = parser.parse_args(argv)

    if args.seed is not None:
        random.seed(args.seed)

    colorama.init()
    logger.remove()
    logger.add(
        sys.stderr,
        colorize=True,
        format='<green>{time}</green> <level>{message}</level>',
        level='DEBUG' if args.debug else 'INFO'
    )

    factors = args.factors
    if factors is None:
        if args.modulus != bls12_377_fr.MODULUS_INT:
            parser.error('--factors is required for a custom --modulus')
        factors = bls12_377_fr.T_FACTORS

    constants = derive_constants(args.modulus, factors)
    status = 0
    if args.check:
        mismatched = diff_constants(constants, checked_in_constants())
        if mismatched:
            report_mismatches(constants, checked_in_constants(), mismatched)
            status = 1
        else:
            logger.info(f'all {len(TABLE_NAMES)} checked-in tables match')
    else:
        sys.stdout.write(render_constants(constants))

    if args.samples:
        params = ModulusParameters.new(args.modulus, constants['GENERATOR_INT'])
        if cross_check(MontgomeryArithmeticEngine(params), args.samples):
            status = 1
    return status


if __name__ == '__main__':
    sys.exit(main())
