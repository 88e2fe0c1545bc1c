"""
Append-only transfer log with a trailing-window query.

Window queries walk backward from the tail and stop at the first transfer
older than the cutoff. That is only exact while insertion order is
timestamp-non-decreasing (one well-ordered producer); a transfer appended
with an older timestamp hides anything behind it from the scan.
"""

import threading


class TransferLog:

    def __init__(self):
        self._transfers = []
        self._lock      = threading.Lock()

    def append(self, transfer):
        with self._lock:
            self._transfers.append(transfer)

    def recent_window(self, now, duration):
        """
        Transfers with now - duration <= timestamp <= now, most recent first.
        Cost is proportional to the window, not the log.
        """
        cutoff = now - duration
        # Bound the scan to the length seen on entry; a concurrent append
        # after this point is simply not part of this window.
        end    = len(self._transfers)
        window = []
        for i in range(end - 1, -1, -1):
            transfer = self._transfers[i]
            if transfer.timestamp < cutoff:
                break
            if transfer.timestamp > now:
                continue
            window.append(transfer)
        return window

    def all(self):
        """Snapshot of the whole log in insertion order."""
        with self._lock:
            return list(self._transfers)

    def __len__(self):
        return len(self._transfers)
