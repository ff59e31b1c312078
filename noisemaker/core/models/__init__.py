"""
Domain models — Pydantic types for records and collaborator outcomes.

    from noisemaker.core.models import Record, RuntimeContext, FileOutcome
"""

from noisemaker.core.models.outcome import (
    FileOutcome,
    ProcessOutcome,
    TransportOutcome,
)
from noisemaker.core.models.record import ActivityResult, Record, RuntimeContext

__all__ = [
    # record.py
    "ActivityResult",
    "Record",
    "RuntimeContext",
    # outcome.py
    "FileOutcome",
    "ProcessOutcome",
    "TransportOutcome",
]
