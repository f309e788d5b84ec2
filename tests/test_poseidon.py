"""Tests for the Poseidon parameter selection table."""

import pytest

from bls12_377_fr import FR_POSEIDON
from fp256_errors import InvalidParameterTable
from fp256_poseidon import PoseidonParameterEntry, PoseidonParameterTable


def test_default_entry():
    entry = FR_POSEIDON.lookup(2)
    assert entry is not None
    assert entry.state_width == 2
    assert entry.partial_rounds == 17
    assert entry.full_rounds == 8
    assert entry.security_margin == 31
    assert entry.reserved == 0


def test_unsupported_widths():
    assert FR_POSEIDON.lookup(1) is None
    assert FR_POSEIDON.lookup(9) is None


def test_default_table():
    assert len(FR_POSEIDON) == 7
    assert FR_POSEIDON.widths == (2, 3, 4, 5, 6, 7, 8)
    assert all(e[1:] == (17, 8, 31, 0) for e in FR_POSEIDON)


def test_widths_must_increase():
    with pytest.raises(InvalidParameterTable):
        PoseidonParameterTable([(3, 17, 8, 31, 0), (2, 17, 8, 31, 0)])
    with pytest.raises(InvalidParameterTable):
        PoseidonParameterTable([(2, 17, 8, 31, 0), (2, 17, 8, 31, 0)])


def test_table_is_immutable():
    table = PoseidonParameterTable([PoseidonParameterEntry(4, 1, 2, 3)])
    assert table.lookup(4) == (4, 1, 2, 3, 0)
    with pytest.raises(AttributeError):
        table._entries = ()
    with pytest.raises(AttributeError):
        table.lookup(4).full_rounds = 0
    assert PoseidonParameterTable([]).lookup(2) is None
