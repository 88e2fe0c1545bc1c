"""
Risk tiers and tabular snapshots of a live GraphStore.

    classify(score)          → CLEAN / WATCH / SUSPICIOUS / BLOCK
    score_summary(store)     → tier counts + max / avg score
    get_dataframes(store)    → {"accounts": DataFrame, "transfers": DataFrame}
"""

from collections import Counter

import pandas as pd

from .config import THRESHOLDS, TIER_COLORS_HEX, TIER_ORDER

ACCOUNT_COLUMNS  = ["account_id", "risk_score", "classification", "color_hex", "sent", "received"]
TRANSFER_COLUMNS = ["sender", "receiver", "amount", "timestamp"]


def classify(score):
    for label, (lo, hi) in THRESHOLDS.items():
        if lo <= score < hi:
            return label
    return "BLOCK"


def score_summary(store):
    accounts = store.accounts()
    scores   = [a.risk for a in accounts]
    tiers    = Counter(classify(s) for s in scores)

    summary = {tier: tiers.get(tier, 0) for tier in reversed(TIER_ORDER)}
    summary.update({
        "max_score": round(max(scores), 3) if scores else 0.0,
        "avg_score": round(sum(scores) / len(scores), 3) if scores else 0.0,
        "accounts":  len(accounts),
        "transfers": store.transfer_count(),
    })
    return summary


# ─────────────────────────────────────────────────────────────
# DATAFRAME SNAPSHOTS
# ─────────────────────────────────────────────────────────────

def accounts_frame(store):
    """One row per account, highest risk first."""
    sent     = Counter()
    received = Counter()
    for t in store.transfers():
        sent[t.sender.account_id]       += 1
        received[t.receiver.account_id] += 1

    rows = []
    for a in store.accounts():
        tier = classify(a.risk)
        rows.append({
            "account_id":     a.account_id,
            "risk_score":     a.risk,
            "classification": tier,
            "color_hex":      TIER_COLORS_HEX[tier],
            "sent":           sent[a.account_id],
            "received":       received[a.account_id],
        })
    df = pd.DataFrame(rows, columns=ACCOUNT_COLUMNS)
    return df.sort_values("risk_score", ascending=False, kind="stable").reset_index(drop=True)


def transfers_frame(store, duration=None):
    """One row per transfer in insertion order; metadata keys become columns."""
    transfers = store.transfers() if duration is None else list(reversed(store.recent_edges(duration)))

    meta_keys = sorted({k for t in transfers for k in t.metadata} - set(TRANSFER_COLUMNS))
    rows = []
    for t in transfers:
        row = t.as_dict()
        metadata = row.pop("metadata")
        for key in meta_keys:
            row[key] = metadata.get(key, "")
        rows.append(row)

    return pd.DataFrame(rows, columns=TRANSFER_COLUMNS + meta_keys)


def get_dataframes(store):
    """Return all snapshot tables as a dict of DataFrames."""
    return {
        "accounts":  accounts_frame(store),
        "transfers": transfers_frame(store),
    }
