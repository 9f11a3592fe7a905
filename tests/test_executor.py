"""Tests for the sync-SDK executor bridge."""

import threading

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from consultations.executor import run_in_executor


class TestRunInExecutor:
    async def test_runs_off_the_event_loop_thread(self):
        caller = threading.get_ident()

        def work(a, b=0):
            return a + b, threading.get_ident()

        total, worker = await run_in_executor(work, 2, b=3)
        assert total == 5
        assert worker != caller

    async def test_propagates_errors(self):
        def boom():
            raise RuntimeError("sdk failure")

        with pytest.raises(RuntimeError):
            await run_in_executor(boom)
