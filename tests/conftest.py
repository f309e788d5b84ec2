"""Shared fixtures: engines for the embedded field and a few other primes."""

import random

import pytest

from bls12_377_fr import FR_ENGINE
from fp256_mont import MontgomeryArithmeticEngine
from fp256_params import ModulusParameters

# (modulus, canonical generator); only the two-adic part of the generator is validated
OTHER_FIELDS = {
    'bn254_fr': (21888242871839275222246405745257275088548364400416034343698204186575808495617, 5),
    'secp256k1_p': (2 ** 256 - 2 ** 32 - 977, 3),
    'p25519': (2 ** 255 - 19, 2),
    'tiny': (97, 5),
}


@pytest.fixture
def rng():
    return random.Random(0)


@pytest.fixture(params=sorted(OTHER_FIELDS))
def other_engine(request):
    q, g = OTHER_FIELDS[request.param]
    return MontgomeryArithmeticEngine(ModulusParameters.new(q, g))


@pytest.fixture(params=['bls12_377_fr'] + sorted(OTHER_FIELDS))
def engine(request):
    if request.param == 'bls12_377_fr':
        return FR_ENGINE
    q, g = OTHER_FIELDS[request.param]
    return MontgomeryArithmeticEngine(ModulusParameters.new(q, g))
