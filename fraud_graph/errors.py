"""Exceptions raised by the fraud graph engine."""


class FraudGraphError(Exception):
    """Base class for every engine error."""


class InvalidTransferError(FraudGraphError, ValueError):
    """A submitted transfer was rejected at the ingestion boundary."""


class ConfigError(FraudGraphError):
    """A thresholds file could not be applied."""
