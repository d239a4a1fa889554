"""
Start / pause / resume / step / reset controller.
"""

import asyncio

import pytest

from bftape import DEFAULT_PROGRAM, ExecutionState, QueueInput, RunOptions, Session


@pytest.mark.asyncio
async def test_start_runs_to_completion():
    out = []
    session = Session(DEFAULT_PROGRAM, on_output=out.append, options=RunOptions(cooperative=False))
    state = await session.start()
    assert "".join(out) == "Hello World!\n"
    assert state.output == "Hello World!\n"
    assert session.execution_state is ExecutionState.IDLE
    assert session.current_line() == 2


@pytest.mark.asyncio
async def test_step_creates_interpreter_lazily():
    session = Session("+\n+")
    assert session.current_state() is None
    assert session.current_line() is None

    state = await session.step()
    assert state.cell == 1
    assert session.execution_state is ExecutionState.IDLE
    assert session.current_line() == 0

    await session.step()
    state = await session.step()
    assert state.cell == 2
    assert session.current_line() == 1


@pytest.mark.asyncio
async def test_pause_then_start_resumes():
    session = Session("+[]")
    task = asyncio.create_task(session.start())
    for _ in range(5):
        await asyncio.sleep(0)
    assert session.execution_state is ExecutionState.RUNNING

    session.pause()
    assert session.execution_state is ExecutionState.PAUSED
    state = await task
    assert state.is_paused
    assert session.execution_state is ExecutionState.PAUSED
    interpreter = session.interpreter

    resumed = asyncio.create_task(session.start())
    await asyncio.sleep(0)
    assert session.execution_state is ExecutionState.RUNNING
    assert session.interpreter is interpreter
    session.pause()
    await resumed
    assert session.execution_state is ExecutionState.PAUSED


@pytest.mark.asyncio
async def test_step_refused_while_running():
    session = Session("+" * 20)
    task = asyncio.create_task(session.start())
    await asyncio.sleep(0)
    assert await session.step() is None
    await task


@pytest.mark.asyncio
async def test_step_allowed_while_paused():
    session = Session("+[]")
    task = asyncio.create_task(session.start())
    for _ in range(5):
        await asyncio.sleep(0)
    session.pause()
    await task
    before = session.interpreter.step_count
    await session.step()
    assert session.interpreter.step_count == before + 1
    assert session.execution_state is ExecutionState.PAUSED


@pytest.mark.asyncio
async def test_reset_discards_interpreter():
    session = Session("+++", options=RunOptions(memory_size=4))
    await session.start()
    assert session.interpreter.memory_size == 4
    session.reset()
    assert session.interpreter is None
    assert session.last_state is None
    assert session.execution_state is ExecutionState.IDLE

    state = await session.start()
    assert state.cell == 3


@pytest.mark.asyncio
async def test_step_refused_while_paused_run_waits_for_input():
    source = QueueInput()
    session = Session(",+[]", on_input_request=source)
    task = asyncio.create_task(session.start())
    await asyncio.sleep(0)

    session.pause()
    assert session.execution_state is ExecutionState.PAUSED
    assert await session.step() is None
    assert session.interpreter.get_state().program_counter == 0

    source.feed("x")
    state = await task
    assert state.is_paused
    assert state.program_counter == 1

    state = await session.step()
    assert state.cell == ord("x") + 1


@pytest.mark.asyncio
async def test_resume_before_pause_is_noticed_keeps_original_run():
    session = Session("+" * 30)
    task = asyncio.create_task(session.start())
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    session.pause()
    assert await session.start() is None
    assert session.execution_state is ExecutionState.RUNNING

    state = await task
    assert state.cell == 30
    assert session.last_state.cell == 30
    assert session.execution_state is ExecutionState.IDLE


@pytest.mark.asyncio
async def test_reset_while_waiting_for_input():
    source = QueueInput()
    session = Session(",.", on_input_request=source)
    task = asyncio.create_task(session.start())
    await asyncio.sleep(0)

    session.reset()
    source.feed("A")
    assert await task is None
    assert session.interpreter is None
    assert session.last_state is None
    assert session.execution_state is ExecutionState.IDLE
