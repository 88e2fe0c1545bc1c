"""
Alert sinks: the receiving end of GraphStore.emit_alert.

A sink only needs an `emit(alert)` method. It is called synchronously
from inside ingestion, so it must return quickly and handle its own
failures.
"""

import logging
import threading


class AlertSink:
    """Base sink. Subclasses override emit()."""

    def emit(self, alert):
        raise NotImplementedError


class CollectingAlertSink(AlertSink):
    """Keeps every alert in memory, in delivery order."""

    def __init__(self):
        self._alerts = []
        self._lock   = threading.Lock()

    def emit(self, alert):
        with self._lock:
            self._alerts.append(alert)

    @property
    def alerts(self):
        with self._lock:
            return list(self._alerts)

    def clear(self):
        with self._lock:
            self._alerts.clear()

    def __len__(self):
        return len(self._alerts)


class LoggingAlertSink(AlertSink):
    """Writes each alert as one WARNING line."""

    def __init__(self, logger_name="fraud_graph.alerts"):
        self.logger = logging.getLogger(logger_name)

    def emit(self, alert):
        self.logger.warning("[%s] severity=%.2f accounts=%s %s",
                            alert.category, alert.severity,
                            ",".join(alert.accounts), alert.message)


class FanOutAlertSink(AlertSink):
    """Forwards every alert to each wrapped sink in order."""

    def __init__(self, *sinks):
        self.sinks = list(sinks)

    def emit(self, alert):
        for sink in self.sinks:
            sink.emit(alert)
