"""Poseidon sponge parameter selection, keyed by state width."""

from typing import Iterable, Iterator, NamedTuple, Optional, Tuple

from fp256_errors import InvalidParameterTable


class PoseidonParameterEntry(NamedTuple):
    state_width: int
    partial_rounds: int
    full_rounds: int
    security_margin: int
    reserved: int = 0


class PoseidonParameterTable:
    __slots__ = ('_entries',)

    def __init__(self, entries: Iterable[PoseidonParameterEntry]):
        entries = tuple(PoseidonParameterEntry(*e) for e in entries)
        for prev, cur in zip(entries, entries[1:]):
            if cur.state_width <= prev.state_width:
                raise InvalidParameterTable(
                    f'state widths must be strictly increasing: {prev.state_width} then {cur.state_width}')
        object.__setattr__(self, '_entries', entries)

    def __setattr__(self, name, value):
        raise AttributeError('PoseidonParameterTable is immutable')

    @property
    def entries(self) -> Tuple[PoseidonParameterEntry, ...]:
        return self._entries

    @property
    def widths(self) -> Tuple[int, ...]:
        return tuple(e.state_width for e in self._entries)

    def lookup(self, state_width: int) -> Optional[PoseidonParameterEntry]:
        for entry in self._entries:
            if entry.state_width == state_width:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PoseidonParameterEntry]:
        return iter(self._entries)

    def __repr__(self):
        return f'PoseidonParameterTable({list(self._entries)!r})'
