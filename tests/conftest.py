"""
Shared fixtures.

Every store under test runs on a ReplayClock so window queries are
anchored at a known "now" rather than wall-clock time.
"""

import pytest

from fraud_graph.feed import ReplayClock
from fraud_graph.sinks import CollectingAlertSink
from fraud_graph.store import GraphStore

T0 = 1_700_000_000.0


@pytest.fixture
def clock():
    return ReplayClock(T0)


@pytest.fixture
def sink():
    return CollectingAlertSink()


@pytest.fixture
def store(clock, sink):
    return GraphStore(sink=sink, clock=clock)


@pytest.fixture
def submit(store, clock):
    """Submit a transfer at T0 + offset, advancing the clock to it first."""
    def _submit(sender, receiver, amount, offset, **metadata):
        clock.advance_to(T0 + offset)
        return store.add_transaction(sender, receiver, amount, T0 + offset, metadata)
    return _submit
