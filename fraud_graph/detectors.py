"""
╔══════════════════════════════════════════════════════════════╗
║   FRAUD GRAPH — detectors.py  (Pluggable Pattern Detectors)  ║
╚══════════════════════════════════════════════════════════════╝

Every detector is subscribed to a GraphStore and called once per newly
ingested transfer. A detector holds no state between calls: all history
comes from the store's trailing-window query, so the same store contents
always produce the same verdict.

    RapidTransferDetector   two accounts bouncing money back and forth
    CircularFlowDetector    money returning to its sender through 3+ accounts
    HighVelocityDetector    one sender firing many transfers in a short window
"""

from abc import ABC, abstractmethod

import networkx as nx

from .config import default_config
from .models import Alert


class Detector(ABC):
    """Capability interface the store fans out to."""

    name = "detector"

    @abstractmethod
    def on_transfer_added(self, transfer, store):
        """
        Evaluate `transfer` against `store`. May call store.recent_edges,
        store.adjust_risk and store.emit_alert; must not (un)register
        observers.
        """

    def _alert(self, store, transfer, category, message, severity, account_ids, risk_bump):
        alert = Alert(category  = category,
                      message   = message,
                      severity  = severity,
                      accounts  = tuple(account_ids),
                      detector  = self.name,
                      timestamp = transfer.timestamp)
        for account_id in dict.fromkeys(account_ids):
            store.adjust_risk(account_id, risk_bump)
        store.emit_alert(alert)
        return alert

    def __repr__(self):
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({params})"


# ─────────────────────────────────────────────────────────────
# RAPID PING-PONG
# ─────────────────────────────────────────────────────────────

class RapidTransferDetector(Detector):
    """
    Flags A and B when, inside the window, A→B and B→A each occur at least
    `burst_count` times with amount >= `min_amount`. Both directions must
    reach the count. No cooldown: every qualifying transfer alerts again.
    """

    name = "rapid_transfer"

    def __init__(self, window=60.0, min_amount=500.0, burst_count=3,
                 severity=0.6, risk_bump=0.03):
        self.window      = window
        self.min_amount  = min_amount
        self.burst_count = burst_count
        self.severity    = severity
        self.risk_bump   = risk_bump

    def on_transfer_added(self, transfer, store):
        a, b = transfer.sender, transfer.receiver
        ab_count = 0
        ba_count = 0

        for e in store.recent_edges(self.window):
            if e.amount < self.min_amount:
                continue
            if e.sender is a and e.receiver is b:
                ab_count += 1
            if e.sender is b and e.receiver is a:
                ba_count += 1

        if ab_count < self.burst_count or ba_count < self.burst_count:
            return None

        message = (f"{a.account_id} ↔ {b.account_id}: {ab_count} out / {ba_count} back "
                   f"≥ {self.min_amount:g} within {self.window:g}s")
        return self._alert(store, transfer, "rapid ping-pong", message, self.severity,
                           [a.account_id, b.account_id], self.risk_bump)


# ─────────────────────────────────────────────────────────────
# CIRCULAR FLOW  (3+ account money-flow cycles only)
# ─────────────────────────────────────────────────────────────

class CircularFlowDetector(Detector):
    """
    Flags a cycle closed by the new transfer u→v: a path v→…→u through the
    windowed money graph. Two-account back-edges are not loops here; the
    rapid detector covers those. The shortest cycle is reported, ties broken
    by id order.
    """

    name = "circular_flow"

    def __init__(self, window=300.0, min_amount=0.0, max_cycle_length=4,
                 severity=0.8, risk_bump=0.05):
        self.window           = window
        self.min_amount       = min_amount
        self.max_cycle_length = max_cycle_length
        self.severity         = severity
        self.risk_bump        = risk_bump

    def _money_graph(self, store):
        money_graph = nx.DiGraph()
        for e in store.recent_edges(self.window):
            if e.amount >= self.min_amount:
                money_graph.add_edge(e.sender.account_id, e.receiver.account_id)
        return money_graph

    def on_transfer_added(self, transfer, store):
        u = transfer.sender.account_id
        v = transfer.receiver.account_id
        if u == v or transfer.amount < self.min_amount or self.max_cycle_length < 3:
            return None

        money_graph = self._money_graph(store)
        if u not in money_graph or v not in money_graph:
            return None

        best = None
        for path in nx.all_simple_paths(money_graph, v, u, cutoff=self.max_cycle_length - 1):
            if len(path) < 3:
                continue
            cycle = [u] + path[:-1]
            key   = (len(cycle), cycle)
            if best is None or key < best:
                best = key

        if best is None:
            return None

        cycle   = best[1]
        message = f"Funds looped through {len(cycle)} accounts: {' → '.join(cycle + [u])}"
        return self._alert(store, transfer, "circular flow", message, self.severity,
                           cycle, self.risk_bump)


# ─────────────────────────────────────────────────────────────
# HIGH VELOCITY
# ─────────────────────────────────────────────────────────────

class HighVelocityDetector(Detector):
    """Flags a sender with at least `min_count` outgoing transfers in the window."""

    name = "high_velocity"

    def __init__(self, window=60.0, min_count=5, severity=0.4, risk_bump=0.02):
        self.window    = window
        self.min_count = min_count
        self.severity  = severity
        self.risk_bump = risk_bump

    def on_transfer_added(self, transfer, store):
        sender = transfer.sender
        sent   = sum(1 for e in store.recent_edges(self.window) if e.sender is sender)
        if sent < self.min_count:
            return None

        message = f"{sender.account_id} sent {sent} transfers within {self.window:g}s"
        return self._alert(store, transfer, "high velocity", message, self.severity,
                           [sender.account_id], self.risk_bump)


# ─────────────────────────────────────────────────────────────
# FACTORY
# ─────────────────────────────────────────────────────────────

DETECTOR_TYPES = {
    RapidTransferDetector.name: RapidTransferDetector,
    CircularFlowDetector.name:  CircularFlowDetector,
    HighVelocityDetector.name:  HighVelocityDetector,
}


def detectors_from_config(config=None):
    """Build one detector per entry under config['detectors'], in config order."""
    if config is None:
        config = default_config()
    return [DETECTOR_TYPES[name](**params)
            for name, params in config["detectors"].items()]
