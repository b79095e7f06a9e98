from __future__ import annotations

import logging
from typing import Iterator

from .models import Unit
from .runner import CommandError, CommandRunner
from .systemctl import SYSTEMCTL, properties_query, show_args
from .util import scan_lines

log = logging.getLogger(__name__)


def iter_blocks(text: str) -> Iterator[str]:
    """Yield blank-line separated blocks; a final unterminated block is flushed."""
    block: list[str] = []
    for line in scan_lines(text):
        if line == "":
            if block:
                yield "\n".join(block)
            block = []
            continue
        block.append(line)
    if block:
        yield "\n".join(block)


def parse_show_output(text: str) -> list[Unit]:
    return [Unit.from_block(b) for b in iter_blocks(text)]


class UnitCatalog:
    """Service units returned by the latest successful ``systemctl show``.

    Units keep the order of the query output. Each successful refresh replaces
    the whole set; a failed one leaves the previous set in place.
    """

    def __init__(self, runner: CommandRunner, filter: str = "", properties: str = "", user: bool = False) -> None:
        self._runner = runner
        self._query = properties_query(properties)
        self._user = user
        self.filter = filter
        self._units: tuple[Unit, ...] = ()
        self._index: dict[str, int] = {}
        self.refresh()

    @property
    def query(self) -> str:
        return self._query

    @property
    def user(self) -> bool:
        return self._user

    @property
    def units(self) -> tuple[Unit, ...]:
        return self._units

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def names(self) -> list[str]:
        return [u.name for u in self._units]

    def refresh(self) -> None:
        self.update(self.filter)

    def update(self, filter: str) -> None:
        self.filter = filter
        try:
            out = self._runner.exec(SYSTEMCTL, show_args(self._query, filter, self._user))
        except CommandError:
            log.info("keeping %d units after failed query for %r", len(self._units), filter)
            return
        self._replace(parse_show_output(out.decode(errors="replace")))

    def _replace(self, parsed: list[Unit]) -> None:
        units: list[Unit] = []
        index: dict[str, int] = {}
        for unit in parsed:
            pos = index.get(unit.name)
            if pos is None:
                index[unit.name] = len(units)
                units.append(unit)
            else:
                # Same name seen again: the later block wins
                units[pos] = unit
        self._units = tuple(units)
        self._index = index
        log.debug("catalog now holds %d units", len(units))

    def get(self, name: str) -> Unit:
        pos = self._index.get(name)
        if pos is None:
            return Unit()
        return self._units[pos]

    def unit_at(self, index: int | None) -> Unit:
        if index is None or not (0 <= index < len(self._units)):
            return Unit()
        return self._units[index]
