import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class Outcome(Generic[R]):
    """Result of one call: either a value or the exception it raised."""
    value: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def map_bounded(
    items: Sequence[T],
    concurrency: int,
    fn: Callable[[T], Awaitable[R]],
) -> List[Outcome[R]]:
    """
    Runs fn over items with at most `concurrency` calls in flight.

    outcomes[i] always belongs to items[i]. An exception from one call is
    captured in its Outcome and never cancels the others.
    """
    if not items:
        return []

    semaphore = asyncio.Semaphore(max(1, int(concurrency)))

    async def run_one(item: T) -> Outcome[R]:
        async with semaphore:
            try:
                return Outcome(value=await fn(item))
            except Exception as e:
                return Outcome(error=e)

    return list(await asyncio.gather(*(run_one(item) for item in items)))
