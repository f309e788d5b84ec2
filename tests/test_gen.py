"""Regenerates the embedded tables and compares them with the checked-in ones."""

import random

import pytest
from loguru import logger

import bls12_377_fr
from bls12_377_fr import FR_ENGINE, MODULUS_INT, T_FACTORS
from fp256_gen import (TABLE_NAMES, check_factorization, checked_in_constants, cross_check, derive_constants,
                       diff_constants, find_generator, highlight_words, main, parse_factors, render_constants)


@pytest.fixture
def quiet_logger():
    yield
    logger.remove()


@pytest.fixture(scope='module')
def derived():
    return derive_constants(MODULUS_INT, T_FACTORS)


def test_regenerated_tables_match_checked_in(derived):
    checked_in = checked_in_constants()
    assert diff_constants(derived, checked_in) == []
    for name in TABLE_NAMES:
        assert derived[name] == checked_in[name], name


def test_generator_search():
    assert find_generator(MODULUS_INT, T_FACTORS) == 22
    assert find_generator(97, [(3, 1)]) == 5


def test_factorization_checks():
    check_factorization(MODULUS_INT, T_FACTORS)
    with pytest.raises(ValueError):
        check_factorization(MODULUS_INT, T_FACTORS[:-1])
    with pytest.raises(ValueError):
        check_factorization(MODULUS_INT, [(9, 1)] + list(T_FACTORS[1:]))


def test_parse_factors():
    assert parse_factors('3,5^2, 7') == [(3, 1), (5, 2), (7, 1)]


def test_diff_reports_drift(derived):
    tampered = dict(checked_in_constants())
    tampered['INV'] = bls12_377_fr.INV + 1
    rows = [list(r) for r in bls12_377_fr.POWERS_OF_G]
    rows[3][0] += 1
    tampered['POWERS_OF_G'] = rows
    assert diff_constants(derived, tampered) == ['INV', 'POWERS_OF_G']


def test_render(derived):
    src = render_constants(derived)
    assert 'TWO_ADICITY = 47\n' in src
    assert 'GENERATOR_INT = 22\n' in src
    assert f'    ({", ".join(str(w) for w in bls12_377_fr.POWERS_OF_G[0])}),\n' in src


def test_highlight_words():
    same, _ = highlight_words([1, 2], [1, 2])
    assert same == '0000000000000001 0000000000000002'
    diff, _ = highlight_words([1, 2], [1, 3])
    assert '0000000000000002' in diff and diff != same


def test_cross_check():
    random.seed(3)
    assert cross_check(FR_ENGINE, 16) == 0


def test_main_check(quiet_logger):
    assert main(['--check', '--samples', '4', '--seed', '1']) == 0


def test_main_renders_custom_field(quiet_logger, capsys):
    assert main(['--modulus', '97', '--factors', '3']) == 0
    out = capsys.readouterr().out
    assert 'GENERATOR_INT = 5\n' in out
    assert 'TWO_ADICITY = 5\n' in out


def test_main_requires_factors_for_custom_modulus(quiet_logger):
    with pytest.raises(SystemExit):
        main(['--modulus', '97'])
