"""Tests for Montgomery arithmetic, cross-checked against Python integers."""

import pytest

from bls12_377_fr import FR_ENGINE, MODULUS_INT
from fp256_bigint import FixedWidthInteger
from fp256_errors import NotInvertible

R = 1 << 256


def fwi(x):
    return FixedWidthInteger.from_int(x)


def samples(engine, rng, count=32):
    q = engine.params.modulus_int
    edge = [0, 1, 2, q - 1, q - 2, (q - 1) // 2]
    return [v % q for v in edge] + [rng.randrange(q) for _ in range(count)]


def mont(engine, x):
    return engine.to_montgomery(fwi(x))


def canon(engine, x):
    return int(engine.from_montgomery(x))


def test_to_montgomery_roundtrip(engine, rng):
    q = engine.params.modulus_int
    for a in samples(engine, rng):
        m = engine.to_montgomery(fwi(a))
        assert int(m) == a * R % q
        assert canon(engine, m) == a


def test_one_and_zero(engine):
    assert engine.one() == engine.params.r
    assert engine.is_one(engine.to_montgomery(1))
    assert canon(engine, engine.zero()) == 0


def test_mont_mul_matches_schoolbook(engine, rng):
    q = engine.params.modulus_int
    r_inv = pow(R, -1, q)
    values = samples(engine, rng)
    for a, b in zip(values, reversed(values)):
        raw = engine.mont_mul(fwi(a), fwi(b))
        assert int(raw) == a * b * r_inv % q
        assert int(raw) == engine.reference_mont_mul(a, b)
        assert canon(engine, engine.mont_mul(mont(engine, a), mont(engine, b))) == a * b % q


def test_mont_square_matches_mont_mul(engine, rng):
    for a in samples(engine, rng):
        x = mont(engine, a)
        assert engine.mont_square(x) == engine.mont_mul(x, x)


def test_add_sub_neg(engine, rng):
    q = engine.params.modulus_int
    values = samples(engine, rng)
    for a, b in zip(values, reversed(values)):
        x, y = mont(engine, a), mont(engine, b)
        assert canon(engine, engine.mod_add(x, y)) == (a + b) % q
        assert canon(engine, engine.mod_sub(x, y)) == (a - b) % q
        assert canon(engine, engine.mod_neg(x)) == -a % q
        assert canon(engine, engine.mod_double(x)) == 2 * a % q
        assert engine.mod_add(x, engine.mod_neg(x)).is_zero()


def test_mod_add_on_raw_values_near_modulus(engine):
    q = engine.params.modulus_int
    res = engine.mod_add(fwi(q - 1), fwi(q - 1))
    assert int(res) == q - 2
    assert int(engine.mod_sub(fwi(0), fwi(1))) == q - 1
    assert engine.mod_neg(fwi(0)).is_zero()


def test_mod_pow(engine, rng):
    q = engine.params.modulus_int
    for a in samples(engine, rng, count=8):
        e = rng.randrange(1 << 300)
        x = mont(engine, a)
        assert canon(engine, engine.mod_pow(x, e)) == pow(a, e, q)
        assert canon(engine, engine.mod_pow(x, [e & (2 ** 64 - 1), e >> 64 & (2 ** 64 - 1)])) == \
            pow(a, e % 2 ** 128, q)
        assert canon(engine, engine.mod_pow(x, fwi(e % R))) == pow(a, e % R, q)
    assert engine.is_one(engine.mod_pow(mont(engine, 5), 0))


def test_mod_pow_rejects_negative_exponent():
    with pytest.raises(ValueError):
        FR_ENGINE.mod_pow(FR_ENGINE.one(), -1)


def test_mod_inverse(engine, rng):
    for a in samples(engine, rng, count=8):
        if a == 0:
            continue
        x = mont(engine, a)
        assert engine.is_one(engine.mont_mul(x, engine.mod_inverse(x)))
        assert engine.mont_mul(x, engine.mod_inverse(x)) == engine.to_montgomery(1)


def test_inverse_of_zero_fails():
    with pytest.raises(NotInvertible):
        FR_ENGINE.mod_inverse(FR_ENGINE.zero())
    with pytest.raises(ZeroDivisionError):
        FR_ENGINE.mod_inverse(FR_ENGINE.zero())


def test_batch_inverse(rng):
    q = MODULUS_INT
    values = [rng.randrange(1, q) for _ in range(10)]
    inverses = FR_ENGINE.batch_inverse([mont(FR_ENGINE, v) for v in values])
    assert [canon(FR_ENGINE, x) for x in inverses] == [pow(v, -1, q) for v in values]
    assert FR_ENGINE.batch_inverse([]) == []
    with pytest.raises(NotInvertible):
        FR_ENGINE.batch_inverse([FR_ENGINE.one(), FR_ENGINE.zero()])


def test_legendre():
    # 2, 3, 5 are squares in Fr and 22 (the generator) is not
    for a in (2, 3, 4, 5, 9):
        assert FR_ENGINE.legendre(mont(FR_ENGINE, a)) == 1
    assert FR_ENGINE.legendre(mont(FR_ENGINE, 22)) == -1
    assert FR_ENGINE.legendre(FR_ENGINE.zero()) == 0


def test_sqrt(rng):
    q = MODULUS_INT
    for a in [0, 1, 4, 5, 9] + [rng.randrange(q) for _ in range(8)]:
        sq = mont(FR_ENGINE, a * a % q)
        root = FR_ENGINE.sqrt(sq)
        assert root is not None
        assert canon(FR_ENGINE, root) in (a, -a % q)
    assert FR_ENGINE.sqrt(mont(FR_ENGINE, 22)) is None


def test_sqrt_in_other_fields(other_engine, rng):
    q = other_engine.params.modulus_int
    for _ in range(4):
        a = rng.randrange(q)
        root = other_engine.sqrt(mont(other_engine, a * a % q))
        assert canon(other_engine, root) in (a, -a % q)
