"""Tests for pre-call pacing."""

import pytest

from src.utils.pacing import DEFAULT_PACING_DELAY_SECONDS, Pacer


class TestPacer:

    def test_sleeps_configured_delay(self, recording_sleep):
        pacer = Pacer(2.5, sleep=recording_sleep)
        pacer.pause()
        pacer.pause()
        assert recording_sleep.delays == [2.5, 2.5]

    def test_default_delay(self, recording_sleep):
        pacer = Pacer(sleep=recording_sleep)
        pacer.pause()
        assert recording_sleep.delays == [DEFAULT_PACING_DELAY_SECONDS]
        assert DEFAULT_PACING_DELAY_SECONDS == 1.0

    def test_zero_disables_sleep(self, recording_sleep):
        pacer = Pacer(0, sleep=recording_sleep)
        pacer.pause()
        assert recording_sleep.delays == []

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError, match="delay_seconds"):
            Pacer(-1)
