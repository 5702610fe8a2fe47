from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Empty:
    pass


@dataclass(frozen=True, slots=True)
class Loading(Generic[T]):
    task: asyncio.Task[T]


@dataclass(frozen=True, slots=True)
class Populated(Generic[T]):
    value: T


CacheState = Union[Empty, Loading[T], Populated[T]]


@dataclass(slots=True)
class SingleFlight(Generic[T]):
    """Write-once async cache that never runs its loader twice concurrently.

    States: Empty -> Loading(task) -> Populated(value). Callers arriving while
    a load is in flight await the same task. A failed load goes back to Empty
    and the error reaches every waiter; the next call starts a fresh load.
    """

    loader: Callable[[], Awaitable[T]]
    _state: CacheState[T] = field(default_factory=Empty, init=False, repr=False)

    @property
    def state(self) -> CacheState[T]:
        return self._state

    async def get(self) -> T:
        state = self._state
        if isinstance(state, Populated):
            return state.value
        if isinstance(state, Loading):
            task = state.task
        else:
            task = asyncio.ensure_future(self._load())
            self._state = Loading(task)
        # A cancelled waiter must not cancel the load other callers share.
        return await asyncio.shield(task)

    async def _load(self) -> T:
        try:
            value = await self.loader()
        except BaseException:
            self._state = Empty()
            raise
        self._state = Populated(value)
        return value
