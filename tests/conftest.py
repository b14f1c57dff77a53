"""Shared test fixtures."""

import pytest


class RecordingSink:
    """Output port stand-in that records raw message bytes."""

    def __init__(self, fail_on=None):
        self.writes = []
        self.fail_on = fail_on
        self.closed = False
        self.name = "Recording Sink"

    def send(self, msg):
        if self.fail_on is not None and len(self.writes) + 1 == self.fail_on:
            raise OSError("device went away")
        self.writes.append(msg.bytes())

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self):
        self.elapsed = 0.0
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)
        self.elapsed += seconds


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_sink():
    return RecordingSink
