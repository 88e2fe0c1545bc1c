"""DataFrame replay end to end."""

import pandas as pd
import pytest

from fraud_graph.feed import ReplayClock, demo_frame, replay
from fraud_graph.sinks import CollectingAlertSink
from fraud_graph.store import GraphStore


@pytest.fixture
def wired():
    clock = ReplayClock()
    sink = CollectingAlertSink()
    store = GraphStore.from_config(sink=sink, clock=clock)
    return store, sink, clock


def test_demo_raises_each_pattern(wired):
    store, sink, clock = wired
    count = replay(store, demo_frame(), clock=clock)

    assert count == len(demo_frame())
    categories = [a.category for a in sink.alerts]
    assert categories.count("rapid ping-pong") == 1
    assert categories.count("circular flow") == 1
    assert categories.count("high velocity") == 1

    assert store.transfers()[0].metadata["channel"] == "UPI"
    assert clock() == demo_frame()["timestamp"].max()


def test_clean_accounts_stay_clean(wired):
    store, sink, clock = wired
    replay(store, demo_frame(), clock=clock)
    for acc in ("ACC_E1", "ACC_E2", "ACC_E3"):
        assert not any(acc in a.accounts for a in sink.alerts)


def test_missing_columns():
    store = GraphStore()
    with pytest.raises(ValueError, match="amount"):
        replay(store, pd.DataFrame({"sender": ["A"], "receiver": ["B"], "timestamp": [0]}))


def test_nan_metadata_skipped():
    clock = ReplayClock()
    store = GraphStore(clock=clock)
    frame = pd.DataFrame({
        "sender":    ["A", "B"],
        "receiver":  ["B", "A"],
        "amount":    [1, 2],
        "timestamp": [0, 1],
        "note":      ["x", None],
    })
    replay(store, frame, clock=clock)
    first, second = store.transfers()
    assert dict(first.metadata) == {"note": "x"}
    assert dict(second.metadata) == {}


def test_integer_ids_keep_their_text():
    clock = ReplayClock()
    store = GraphStore(clock=clock)
    frame = pd.DataFrame({
        "sender":    [101, 202],
        "receiver":  [202, 101],
        "amount":    [10.5, 20.0],
        "timestamp": [0, 1],
        "batch":     [7, 8],
    })
    replay(store, frame, clock=clock)
    assert {a.account_id for a in store.accounts()} == {"101", "202"}
    first = store.transfers()[0]
    assert first.sender.account_id == "101"
    assert first.amount == 10.5
    assert dict(first.metadata) == {"batch": "7"}


def test_replay_clock_never_goes_back():
    clock = ReplayClock(10)
    clock.advance_to(5)
    assert clock() == 10.0
    clock.advance_to(12)
    assert clock() == 12.0
