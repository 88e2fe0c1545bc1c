"""
╔══════════════════════════════════════════════════════════════╗
║   FRAUD GRAPH — Streaming Graph-Update Engine                ║
║   Live transfer graph + pluggable detectors + risk alerts     ║
╚══════════════════════════════════════════════════════════════╝

Public API:
    GraphStore            → live graph, single ingestion entry point
    RapidTransferDetector → ping-pong burst between two accounts
    CircularFlowDetector  → 3+ account money loops
    HighVelocityDetector  → one sender, many transfers
    CollectingAlertSink   → in-memory alert sink
    get_dataframes(store) → pandas snapshot tables
"""

from .config import load_config
from .detectors import (
    CircularFlowDetector,
    Detector,
    HighVelocityDetector,
    RapidTransferDetector,
    detectors_from_config,
)
from .errors import ConfigError, FraudGraphError, InvalidTransferError
from .models import Account, Alert, Transfer
from .registry import AccountRegistry
from .scoring import classify, get_dataframes, score_summary
from .sinks import AlertSink, CollectingAlertSink, FanOutAlertSink, LoggingAlertSink
from .store import GraphStore, build_graph
from .transfer_log import TransferLog

__version__ = "0.4.0"
