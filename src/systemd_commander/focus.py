from __future__ import annotations

from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")


class FocusRing(Generic[T]):
    """Cyclic focus over a fixed list of targets.

    ``apply`` is called with the newly focused target after every move.
    """

    def __init__(self, targets: Sequence[T], apply: Callable[[T], object]) -> None:
        if not targets:
            raise ValueError("focus ring needs at least one target")
        self._targets = tuple(targets)
        self._apply = apply
        self._i = 0

    @property
    def index(self) -> int:
        return self._i

    @property
    def current(self) -> T:
        return self._targets[self._i]

    def __len__(self) -> int:
        return len(self._targets)

    def next(self) -> None:
        self._i = (self._i + 1) % len(self._targets)
        self._apply(self.current)

    def previous(self) -> None:
        self._i = (self._i - 1) % len(self._targets)
        self._apply(self.current)

    def set_to(self, target: T) -> None:
        for i, t in enumerate(self._targets):
            if t is target:
                self._i = i
                self._apply(target)
                return
