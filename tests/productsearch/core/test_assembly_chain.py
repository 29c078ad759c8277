"""Tests for the stage chain: ordering, absence and background task cancellation."""

import asyncio

import pytest

from productsearch.assembly.chain import AssemblyChain, Outcome, discard, overlap
from productsearch.document.builder import IndexContext, ProductDocumentBuilder


class RecordingStage:
    def __init__(self, name, log, outcome=Outcome.FORWARD, call_proceed=True):
        self.name = name
        self.log = log
        self.outcome = outcome
        self.call_proceed = call_proceed

    async def handle(self, context, proceed):
        self.log.append(self.name)
        if self.outcome is Outcome.ABSENT:
            return Outcome.ABSENT
        if self.call_proceed:
            return await proceed()
        return Outcome.FORWARD


class RescuingStage:
    """Ignores the downstream outcome and claims success."""

    name = "rescuer"

    async def handle(self, context, proceed):
        await proceed()
        return Outcome.FORWARD


def _context():
    return IndexContext(builder=ProductDocumentBuilder(id=1))


def _run(chain):
    return asyncio.run(chain.run(_context()))


class TestAssemblyChain:
    def test_runs_stages_in_registration_order(self):
        log = []
        chain = AssemblyChain([RecordingStage(name, log) for name in ("a", "b", "c")])
        assert _run(chain) is Outcome.FORWARD
        assert log == ["a", "b", "c"]

    def test_stage_names(self):
        chain = AssemblyChain([RecordingStage(name, []) for name in ("a", "b")])
        assert chain.stage_names == ["a", "b"]

    def test_empty_chain_forwards(self):
        assert _run(AssemblyChain([])) is Outcome.FORWARD

    def test_absent_stops_later_stages(self):
        log = []
        chain = AssemblyChain(
            [RecordingStage("a", log), RecordingStage("b", log, outcome=Outcome.ABSENT), RecordingStage("c", log)]
        )
        assert _run(chain) is Outcome.ABSENT
        assert log == ["a", "b"]

    def test_downstream_absent_cannot_be_rescued(self):
        log = []
        chain = AssemblyChain([RescuingStage(), RecordingStage("late", log, outcome=Outcome.ABSENT)])
        assert _run(chain) is Outcome.ABSENT

    def test_stage_that_skips_proceed_still_runs_the_rest(self):
        log = []
        chain = AssemblyChain([RecordingStage("a", log, call_proceed=False), RecordingStage("b", log)])
        assert _run(chain) is Outcome.FORWARD
        assert log == ["a", "b"]

    def test_rest_of_chain_runs_once_when_proceed_called_twice(self):
        log = []

        class TwiceStage:
            name = "twice"

            async def handle(self, context, proceed):
                await proceed()
                return await proceed()

        chain = AssemblyChain([TwiceStage(), RecordingStage("b", log)])
        _run(chain)
        assert log == ["b"]


class TestOverlap:
    def test_pending_tasks_cancelled_when_downstream_absent(self):
        async def scenario():
            task = asyncio.ensure_future(asyncio.sleep(10))

            async def proceed():
                return Outcome.ABSENT

            outcome = await overlap([task, None], proceed)
            await asyncio.sleep(0)
            return outcome, task

        outcome, task = asyncio.run(scenario())
        assert outcome is Outcome.ABSENT
        assert task.cancelled()

    def test_pending_tasks_cancelled_when_downstream_raises(self):
        async def scenario():
            task = asyncio.ensure_future(asyncio.sleep(10))

            async def proceed():
                raise RuntimeError("stage failed")

            with pytest.raises(RuntimeError):
                await overlap([task], proceed)
            await asyncio.sleep(0)
            return task

        assert asyncio.run(scenario()).cancelled()

    def test_tasks_left_running_when_downstream_forwards(self):
        async def scenario():
            task = asyncio.ensure_future(asyncio.sleep(0, result="done"))

            async def proceed():
                return Outcome.FORWARD

            outcome = await overlap([task], proceed)
            return outcome, await task

        assert asyncio.run(scenario()) == (Outcome.FORWARD, "done")


class TestDiscard:
    def test_cancels_pending_and_retrieves_failed(self):
        async def scenario():
            loop = asyncio.get_running_loop()
            pending = asyncio.ensure_future(asyncio.sleep(10))
            failed = loop.create_future()
            failed.set_exception(RuntimeError("read failed"))
            finished = loop.create_future()
            finished.set_result("done")

            discard([pending, failed, finished, None])
            await asyncio.sleep(0)
            return pending, failed, finished

        pending, failed, finished = asyncio.run(scenario())
        assert pending.cancelled()
        assert failed.exception().args == ("read failed",)
        assert finished.result() == "done"
