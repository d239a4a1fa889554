"""
Output sink ordering and the asynchronous input source contract.
"""

import asyncio

import pytest

from bftape import BrainfuckInterpreter, QueueInput, ReentrantStepError, run_string


@pytest.mark.asyncio
async def test_async_input_source_is_echoed():
    async def source():
        return "A"

    out = []
    interp = BrainfuckInterpreter(",.", on_output=out.append, on_input_request=source)
    state = await interp.run()
    assert out == ["A"]
    assert state.input == "A"
    assert state.input_index == 1


@pytest.mark.asyncio
async def test_plain_callable_input_source():
    calls = []

    def source():
        calls.append(1)
        return "hi"

    out = []
    interp = BrainfuckInterpreter(",.,.", on_output=out.append, on_input_request=source)
    await interp.run()
    assert out == ["h", "i"]
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_source_is_asked_once_per_exhaustion():
    calls = []

    def source():
        calls.append(1)
        return "" if len(calls) > 1 else "a"

    interp = BrainfuckInterpreter(",,,", on_input_request=source)
    state = await interp.run()
    # "a" covers the first read; the second and third each find the buffer empty.
    assert len(calls) == 3
    assert state.cell == 0
    assert state.input == "a"


@pytest.mark.asyncio
async def test_no_input_source_writes_zero():
    interp = BrainfuckInterpreter("+++,")
    state = await interp.run()
    assert state.cell == 0
    assert state.input_index == 0


@pytest.mark.asyncio
async def test_buffered_input_is_used_before_asking_again():
    calls = []

    def source():
        calls.append(1)
        return "xy"

    interp = BrainfuckInterpreter(",>,>,", on_input_request=source)
    state = await interp.run()
    assert list(state.memory[:3]) == [ord("x"), ord("y"), ord("x")]
    assert len(calls) == 2
    assert state.input == "xyxy"
    assert state.pending_input == "y"
    assert state.consumed_input == "xyx"


@pytest.mark.asyncio
async def test_wide_characters_keep_low_byte():
    interp = BrainfuckInterpreter(",", on_input_request=lambda: "Ł")
    state = await interp.run()
    assert state.cell == 0x41


@pytest.mark.asyncio
async def test_output_sink_sees_characters_in_execution_order():
    seen = []
    interp = BrainfuckInterpreter("+.+.+.", on_output=lambda c: seen.append((c, interp.get_state().output)))
    await interp.run()
    assert seen == [
        (chr(1), chr(1)),
        (chr(2), chr(1) + chr(2)),
        (chr(3), chr(1) + chr(2) + chr(3)),
    ]


@pytest.mark.asyncio
async def test_step_suspends_until_input_arrives():
    source = QueueInput()
    interp = BrainfuckInterpreter(",.", on_input_request=source)

    task = asyncio.create_task(interp.step())
    await asyncio.sleep(0)
    assert not task.done()
    assert source.requests == 1
    state = interp.get_state()
    assert state.program_counter == 0

    source.feed("Q")
    assert await task is True
    assert interp.get_state().cell == ord("Q")
    assert interp.get_state().program_counter == 1


@pytest.mark.asyncio
async def test_reset_while_waiting_for_input_discards_the_read():
    source = QueueInput()
    interp = BrainfuckInterpreter(",.", on_input_request=source)
    initial = interp.get_state()

    task = asyncio.create_task(interp.step())
    await asyncio.sleep(0)
    interp.reset()
    assert interp.get_state() == initial

    source.feed("A")
    assert await task is False
    assert interp.get_state() == initial
    assert interp.step_count == 0

    # The machine is usable again once the abandoned step has returned.
    source.feed("B")
    state = await interp.run()
    assert state.output == "B"
    assert state.input == "B"


@pytest.mark.asyncio
async def test_reset_while_run_loop_waits_ends_that_loop():
    source = QueueInput()
    interp = BrainfuckInterpreter(",+.", on_input_request=source)

    task = asyncio.create_task(interp.run())
    await asyncio.sleep(0)
    interp.reset()
    source.feed("a")
    state = await task

    assert not state.is_running
    assert state.program_counter == 0
    assert state.input == ""
    assert not state.memory.any()
    assert not interp.busy


@pytest.mark.asyncio
async def test_second_step_while_waiting_is_rejected():
    source = QueueInput()
    interp = BrainfuckInterpreter(",", on_input_request=source)

    task = asyncio.create_task(interp.step())
    await asyncio.sleep(0)
    with pytest.raises(ReentrantStepError) as exc:
        await interp.step()
    assert exc.value.program_counter == 0

    source.feed("z")
    assert await task is True
    assert interp.get_state().program_counter == 1


@pytest.mark.asyncio
async def test_pause_during_input_wait_takes_effect_after_the_read():
    source = QueueInput()
    interp = BrainfuckInterpreter(",+.", on_input_request=source)

    task = asyncio.create_task(interp.run())
    await asyncio.sleep(0)
    interp.pause()
    assert interp.get_state().is_running

    source.feed("a")
    state = await task
    assert state.is_paused
    assert not state.is_running
    assert state.program_counter == 1
    assert state.cell == ord("a")

    state = await interp.resume()
    assert state.output == "b"
    assert not state.is_paused


def test_queue_input_created_outside_event_loop():
    source = QueueInput()
    source.feed("A")
    result = asyncio.run(run_string(",.", on_input_request=source))
    assert result.output == "A"
    assert source.requests == 1
