"""
Value types shared by the store, detectors and sinks.

Account   — canonical per-id instance owned by the registry
Transfer  — immutable directed money_flow event between two accounts
Alert     — immutable detector verdict forwarded to the alert sink
"""

from dataclasses import dataclass, field
from types import MappingProxyType


class Account:
    """
    One named party. Instances are only created by AccountRegistry, so
    `a is b` is the equality test for accounts everywhere else.

    The risk score is read-only here; AccountRegistry.adjust_risk is the
    single mutation path.
    """

    __slots__ = ("account_id", "_risk")

    def __init__(self, account_id):
        self.account_id = account_id
        self._risk      = 0.0

    @property
    def risk(self):
        return self._risk

    def __repr__(self):
        return f"Account({self.account_id!r}, risk={self._risk:.3f})"


@dataclass(frozen=True, eq=False)
class Transfer:
    sender:    Account
    receiver:  Account
    amount:    float
    timestamp: float
    metadata:  MappingProxyType = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def involves(self, account):
        return self.sender is account or self.receiver is account

    def as_dict(self):
        return {
            "sender":    self.sender.account_id,
            "receiver":  self.receiver.account_id,
            "amount":    self.amount,
            "timestamp": self.timestamp,
            "metadata":  dict(self.metadata),
        }


@dataclass(frozen=True)
class Alert:
    """
    `severity` is a relative weight between detectors, not a percentage.
    `accounts` holds the implicated account ids in detector order.
    """
    category:  str
    message:   str
    severity:  float
    accounts:  tuple
    detector:  str = ""
    timestamp: float = 0.0

    def as_dict(self):
        return {
            "category":  self.category,
            "message":   self.message,
            "severity":  self.severity,
            "accounts":  list(self.accounts),
            "detector":  self.detector,
            "timestamp": self.timestamp,
        }
