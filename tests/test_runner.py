# SPDX-License-Identifier: MIT

import asyncio
import threading

import typer

from wordsprint.terminal import runner


async def test_prompt_leaves_event_loop_running():
    answered = threading.Event()
    loop = asyncio.get_running_loop()

    def blocking_prompt(text, **kwargs):
        # Answers only if the loop fired its timer meanwhile.
        return "2025-11-03 900" if answered.wait(timeout=2) else ""

    loop.call_later(0.01, answered.set)

    line = await runner.ask(blocking_prompt, "day total", default="")

    assert line == "2025-11-03 900"


async def test_confirm_conflict_runs_off_loop_thread(monkeypatch):
    seen = {}

    def fake_confirm(text, default):
        seen["thread"] = threading.get_ident()
        seen["text"] = text
        seen["default"] = default
        return True

    monkeypatch.setattr(typer, "confirm", fake_confirm)

    assert await runner.confirm_conflict("2025-11-03", 1200, 900) is True
    assert seen["thread"] != threading.get_ident()
    assert "1,200" in seen["text"]
    assert seen["default"] is False


async def test_prompts_are_taken_one_at_a_time():
    active = []
    overlap = []
    lock = threading.Lock()

    def slow_prompt(text):
        with lock:
            active.append(text)
            if len(active) > 1:
                overlap.append(text)
        threading.Event().wait(0.02)
        with lock:
            active.remove(text)
        return text

    answers = await asyncio.gather(
        runner.ask(slow_prompt, "first"), runner.ask(slow_prompt, "second")
    )

    assert answers == ["first", "second"]
    assert overlap == []
