"""Alert sinks."""

import logging

from fraud_graph.models import Alert
from fraud_graph.sinks import CollectingAlertSink, FanOutAlertSink, LoggingAlertSink

ALERT = Alert("rapid ping-pong", "A ↔ B", 0.6, ("A", "B"), "rapid_transfer", 10.0)


def test_collecting_sink_keeps_order():
    sink = CollectingAlertSink()
    second = Alert("circular flow", "loop", 0.8, ("C",))
    sink.emit(ALERT)
    sink.emit(second)
    assert sink.alerts == [ALERT, second]
    sink.clear()
    assert len(sink) == 0


def test_logging_sink(caplog):
    with caplog.at_level(logging.WARNING, logger="fraud_graph.alerts"):
        LoggingAlertSink().emit(ALERT)
    assert "rapid ping-pong" in caplog.text
    assert "A,B" in caplog.text


def test_fan_out_sink():
    a, b = CollectingAlertSink(), CollectingAlertSink()
    FanOutAlertSink(a, b).emit(ALERT)
    assert a.alerts == [ALERT]
    assert b.alerts == [ALERT]


def test_alert_as_dict():
    d = ALERT.as_dict()
    assert d["accounts"] == ["A", "B"]
    assert d["detector"] == "rapid_transfer"
    assert d["severity"] == 0.6
