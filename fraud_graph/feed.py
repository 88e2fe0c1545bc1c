"""
╔══════════════════════════════════════════════════════════════╗
║   FRAUD GRAPH — feed.py  (DataFrame Replay Producer)         ║
║   Run with: python -m fraud_graph.feed                       ║
╚══════════════════════════════════════════════════════════════╝

Feeds a transactions table into a GraphStore row by row, the way a live
producer would call GraphStore.submit.

Required columns: sender, receiver, amount, timestamp
Any other column is passed through as string metadata.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["sender", "receiver", "amount", "timestamp"]


class ReplayClock:
    """Store clock that follows the newest replayed timestamp."""

    def __init__(self, start=0.0):
        self.now = float(start)

    def __call__(self):
        return self.now

    def advance_to(self, timestamp):
        self.now = max(self.now, float(timestamp))


def replay(store, frame, clock=None):
    """
    Submit every row of `frame` to `store` in row order.
    When `clock` is a ReplayClock it is advanced to each row's timestamp
    before the row is submitted. Returns the number of rows submitted.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"Replay frame is missing columns: {', '.join(missing)}")

    extra = [c for c in frame.columns if c not in REQUIRED_COLUMNS]
    count = 0

    # column-wise so each column keeps its own dtype (iterrows upcasts int ids to float)
    columns = {c: frame[c].tolist() for c in frame.columns}

    for i in range(len(frame)):
        metadata = {str(c): str(columns[c][i]) for c in extra if not pd.isna(columns[c][i])}
        timestamp = float(columns["timestamp"][i])
        if clock is not None:
            clock.advance_to(timestamp)

        store.submit(str(columns["sender"][i]), str(columns["receiver"][i]),
                     float(columns["amount"][i]), timestamp, metadata)
        count += 1

    logger.info("Replayed %d transfers", count)
    return count


# ─────────────────────────────────────────────────────────────
# SAMPLE TRAFFIC
# ─────────────────────────────────────────────────────────────

def demo_frame(t0=0.0):
    """
    Sample traffic with one of each pattern:
      Ring A  — ACC_A1 ↔ ACC_A2 ping-pong, 3 each way
      Ring C  — ACC_C1 → ACC_C2 → ACC_C3 → ACC_C1 loop
      Ring D  — ACC_D1 fanning out to five receivers
      CLEAN   — a couple of unrelated one-off payments
    """
    rows = [
        # ── RING A (ping-pong) ──
        {"sender": "ACC_A1", "receiver": "ACC_A2", "amount": 1000, "offset": 0,  "channel": "UPI"},
        {"sender": "ACC_A2", "receiver": "ACC_A1", "amount": 1000, "offset": 1,  "channel": "UPI"},
        {"sender": "ACC_A1", "receiver": "ACC_A2", "amount": 1000, "offset": 2,  "channel": "UPI"},
        {"sender": "ACC_A2", "receiver": "ACC_A1", "amount": 1000, "offset": 3,  "channel": "UPI"},
        {"sender": "ACC_A1", "receiver": "ACC_A2", "amount": 1000, "offset": 4,  "channel": "UPI"},
        {"sender": "ACC_A2", "receiver": "ACC_A1", "amount": 1000, "offset": 5,  "channel": "UPI"},
        # ── RING C (loop: C1→C2→C3→C1) ──
        {"sender": "ACC_C1", "receiver": "ACC_C2", "amount": 14000, "offset": 10, "channel": "NEFT"},
        {"sender": "ACC_C2", "receiver": "ACC_C3", "amount": 13500, "offset": 11, "channel": "NEFT"},
        {"sender": "ACC_C3", "receiver": "ACC_C1", "amount": 13000, "offset": 12, "channel": "NEFT"},
        # ── RING D (fan-out) ──
        {"sender": "ACC_D1", "receiver": "ACC_D2", "amount": 2200, "offset": 20, "channel": "Wallet"},
        {"sender": "ACC_D1", "receiver": "ACC_D3", "amount": 2100, "offset": 21, "channel": "Wallet"},
        {"sender": "ACC_D1", "receiver": "ACC_D4", "amount": 2000, "offset": 22, "channel": "Wallet"},
        {"sender": "ACC_D1", "receiver": "ACC_D5", "amount": 1900, "offset": 23, "channel": "Wallet"},
        {"sender": "ACC_D1", "receiver": "ACC_D6", "amount": 1800, "offset": 24, "channel": "Wallet"},
        # ── CLEAN ──
        {"sender": "ACC_E1", "receiver": "ACC_E2", "amount": 450,  "offset": 30, "channel": "UPI"},
        {"sender": "ACC_E3", "receiver": "ACC_E1", "amount": 120,  "offset": 40, "channel": "UPI"},
    ]
    df = pd.DataFrame(rows)
    df["timestamp"] = t0 + df.pop("offset")
    return df[["sender", "receiver", "amount", "timestamp", "channel"]]


# ─────────────────────────────────────────────────────────────
# QUICK SELF-TEST
# ─────────────────────────────────────────────────────────────

if __name__ == "__main__":
    from .scoring import accounts_frame, score_summary
    from .sinks import CollectingAlertSink, FanOutAlertSink, LoggingAlertSink
    from .store import GraphStore

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    clock     = ReplayClock()
    collected = CollectingAlertSink()
    store     = GraphStore.from_config(sink=FanOutAlertSink(collected, LoggingAlertSink()), clock=clock)

    replay(store, demo_frame(), clock=clock)

    summary = score_summary(store)
    print(f"\nAccounts  : {summary['accounts']}")
    print(f"Transfers : {summary['transfers']}")
    print(f"Alerts    : {len(collected)}\n")

    print("Alerts by category:")
    for category in sorted({a.category for a in collected.alerts}):
        n = sum(1 for a in collected.alerts if a.category == category)
        print(f"  {category:16s}: {n}")

    print("\nTop 5 by risk score:")
    print(accounts_frame(store).head(5).to_string(index=False))
