"""
╔══════════════════════════════════════════════════════════════╗
║   FRAUD GRAPH — store.py  (Live Graph Store)                 ║
║   Account registry + transfer log + detector fan-out         ║
╚══════════════════════════════════════════════════════════════╝

Ingestion pipeline for one event (all synchronous, in the caller's thread):
    1. validate            → InvalidTransferError on bad input, no state change
    2. resolve accounts    → registry get-or-create
    3. append transfer     → transfer log
    4. risk nudge          → +RISK_NUDGE on both accounts
    5. detector fan-out    → every subscribed detector, subscription order
    6. alerts              → forwarded to the sink as each detector emits them

Graph views:
    build_graph(transfers)   → NetworkX MultiDiGraph (money_flow edges)
    GraphStore.to_graph()    → whole graph or a trailing window
"""

import logging
import math
import threading
import time
from collections.abc import Mapping

import networkx as nx

from .config import RISK_NUDGE, load_config
from .detectors import detectors_from_config
from .errors import InvalidTransferError
from .models import Transfer
from .registry import AccountRegistry
from .transfer_log import TransferLog

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# GRAPH BUILDER
# ─────────────────────────────────────────────────────────────

def build_graph(transfers):
    """
    Build a NetworkX MultiDiGraph from transfers.
    Nodes are account ids, one money_flow edge per transfer.
    """
    G = nx.MultiDiGraph()

    for t in transfers:
        for account in (t.sender, t.receiver):
            if account.account_id not in G:
                G.add_node(account.account_id,
                           node_type  = "account",
                           risk_score = account.risk)

        G.add_edge(t.sender.account_id, t.receiver.account_id,
                   edge_type = "money_flow",
                   amount    = t.amount,
                   timestamp = t.timestamp,
                   metadata  = dict(t.metadata))

    return G


# ─────────────────────────────────────────────────────────────
# INPUT VALIDATION
# ─────────────────────────────────────────────────────────────

def _check_id(value, role):
    if not isinstance(value, str) or not value.strip():
        raise InvalidTransferError(f"{role} id must be a non-empty string, got {value!r}")


def _check_number(value, role):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidTransferError(f"{role} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidTransferError(f"{role} must be finite, got {value!r}")


def _check_metadata(metadata):
    if not isinstance(metadata, Mapping):
        raise InvalidTransferError(f"metadata must be a mapping, got {metadata!r}")
    for key, value in metadata.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidTransferError(
                f"metadata must map str to str, got {key!r}: {value!r}")


# ─────────────────────────────────────────────────────────────
# GRAPH STORE
# ─────────────────────────────────────────────────────────────

class GraphStore:
    """
    Live in-memory transfer graph with a single ingestion entry point.

    The subscription set is an immutable tuple swapped under a lock on every
    (un)register, so a fan-out in progress keeps iterating the snapshot it
    started with. Detectors must not (un)register from inside their own
    callback.
    """

    def __init__(self, sink=None, clock=time.time, risk_nudge=RISK_NUDGE):
        self.registry    = AccountRegistry()
        self.log         = TransferLog()
        self.risk_nudge  = risk_nudge
        self._clock      = clock
        self._sink       = sink
        self._observers  = ()
        self._obs_lock   = threading.Lock()
        self._latest     = float("-inf")
        self._time_lock  = threading.Lock()

    @classmethod
    def from_config(cls, config=None, sink=None, clock=time.time):
        """
        Build a store with the configured risk nudge and every configured
        detector registered. `config` is a mapping from load_config(), a
        thresholds file path, or None for the defaults.
        """
        if not isinstance(config, dict):
            config = load_config(config)
        store = cls(sink=sink, clock=clock, risk_nudge=config["risk"]["nudge"])
        for detector in detectors_from_config(config):
            store.register_observer(detector)
        return store

    # ── clock / sink ──

    def now(self):
        """
        The later of the clock and the newest ingested timestamp, so a
        transfer stamped ahead of the clock is still inside its own window.
        """
        return max(self._clock(), self._latest)

    def attach_sink(self, sink):
        """Replace the alert sink. None detaches it."""
        self._sink = sink

    @property
    def sink(self):
        return self._sink

    # ── subscriptions ──

    def register_observer(self, detector):
        with self._obs_lock:
            self._observers = self._observers + (detector,)
        logger.info("Registered detector %s", _name(detector))

    def unregister_observer(self, detector):
        """Remove the first registration of `detector`; unknown detectors are ignored."""
        with self._obs_lock:
            observers = list(self._observers)
            if detector not in observers:
                return
            observers.remove(detector)
            self._observers = tuple(observers)
        logger.info("Unregistered detector %s", _name(detector))

    def observers(self):
        return self._observers

    # ── ingestion ──

    def add_transaction(self, from_id, to_id, amount, timestamp=None, metadata=None):
        """
        Ingest one transfer and run every subscribed detector on it.
        Returns the new Transfer once all detectors have finished.
        Detector exceptions propagate to the caller.
        """
        if timestamp is None:
            timestamp = self.now()
        _check_id(from_id, "sender")
        _check_id(to_id, "receiver")
        _check_number(amount, "amount")
        if amount < 0:
            raise InvalidTransferError(f"amount must be non-negative, got {amount!r}")
        _check_number(timestamp, "timestamp")
        if metadata is None:
            metadata = {}
        _check_metadata(metadata)

        sender   = self.registry.get_or_create(from_id)
        receiver = self.registry.get_or_create(to_id)
        transfer = Transfer(sender, receiver, float(amount), float(timestamp), metadata)
        self.log.append(transfer)
        with self._time_lock:
            self._latest = max(self._latest, transfer.timestamp)

        self.registry.adjust_risk(from_id, self.risk_nudge)
        self.registry.adjust_risk(to_id,   self.risk_nudge)

        logger.debug("Ingested %s → %s amount=%s", from_id, to_id, amount)

        for detector in self._observers:
            detector.on_transfer_added(transfer, self)

        return transfer

    submit = add_transaction

    # ── detector-facing API ──

    def emit_alert(self, alert):
        """Forward to the sink. With no sink attached the alert is dropped."""
        sink = self._sink
        if sink is None:
            logger.debug("No sink attached, dropping %s alert", alert.category)
            return
        logger.info("Alert %s severity=%.2f accounts=%s",
                    alert.category, alert.severity, ",".join(alert.accounts))
        sink.emit(alert)

    def adjust_risk(self, account_id, delta):
        return self.registry.adjust_risk(account_id, delta)

    def recent_edges(self, duration):
        """Transfers inside [now - duration, now], most recent first."""
        return self.log.recent_window(self.now(), duration)

    # ── read views ──

    def account(self, account_id):
        return self.registry.get(account_id)

    def accounts(self):
        return self.registry.accounts()

    def transfers(self):
        return self.log.all()

    def transfer_count(self):
        return len(self.log)

    def to_graph(self, duration=None):
        """MultiDiGraph of the whole log, or of the trailing `duration` seconds."""
        if duration is None:
            return build_graph(self.log.all())
        return build_graph(self.recent_edges(duration))

    def neighbours(self, account_id, duration=None):
        """Ids of accounts that sent money to or received money from `account_id`."""
        account = self.registry.get(account_id)
        if account is None:
            return set()
        transfers = self.log.all() if duration is None else self.recent_edges(duration)

        nbrs = set()
        for t in transfers:
            if t.involves(account):
                nbrs.update((t.sender.account_id, t.receiver.account_id))
        nbrs.discard(account_id)
        return nbrs


def _name(detector):
    return getattr(detector, "name", type(detector).__name__)
