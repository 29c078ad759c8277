"""Ordered chain of assembly stages.

A stage receives the shared ``IndexContext`` and a ``proceed`` callable that
runs the rest of the chain. It either returns ``Outcome.ABSENT`` without
proceeding, or proceeds and passes the downstream outcome back up.
Stages that overlap their own read with downstream work launch the read,
call ``proceed`` and only then await it.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Protocol

from productsearch.document.builder import IndexContext

Proceed = Callable[[], Awaitable["Outcome"]]


class Outcome(Enum):
    FORWARD = "forward"
    ABSENT = "absent"


class Stage(Protocol):
    name: str

    async def handle(self, context: IndexContext, proceed: Proceed) -> Outcome: ...


class AssemblyChain:
    """Runs stages in registration order.

    Downstream ABSENT always wins: a stage cannot turn an aborted run back
    into a document, and a stage that returns without calling ``proceed``
    still has the rest of the chain run for it.
    """

    def __init__(self, stages: Sequence[Stage]) -> None:
        self.stages = list(stages)

    @property
    def stage_names(self) -> list[str]:
        return [stage.name for stage in self.stages]

    async def run(self, context: IndexContext) -> Outcome:
        return await self._run_from(0, context)

    async def _run_from(self, index: int, context: IndexContext) -> Outcome:
        if index >= len(self.stages):
            return Outcome.FORWARD

        downstream: list[Outcome] = []

        async def proceed() -> Outcome:
            if downstream:
                return downstream[0]
            outcome = await self._run_from(index + 1, context)
            downstream.append(outcome)
            return outcome

        outcome = await self.stages[index].handle(context, proceed)
        if outcome is Outcome.ABSENT:
            return Outcome.ABSENT
        return await proceed()


async def overlap(tasks: Sequence[asyncio.Future | None], proceed: Proceed) -> Outcome:
    """Run the rest of the chain while ``tasks`` are in flight.

    Pending tasks are cancelled when the downstream raises or resolves to
    ABSENT; their results would never be written.
    """
    try:
        outcome = await proceed()
    except BaseException:
        discard(tasks)
        raise
    if outcome is Outcome.ABSENT:
        discard(tasks)
    return outcome


def discard(tasks: Sequence[asyncio.Future | None]) -> None:
    """Cancel reads whose results will not be used, and retrieve failed ones."""
    for task in tasks:
        if task is None:
            continue
        if not task.done():
            task.cancel()
        elif not task.cancelled():
            task.exception()
