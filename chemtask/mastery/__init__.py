"""
Mastery tracking on top of the BKT estimator.

Components:
- state_store: BktStateStore protocol, SQLite and in-memory stores
- tracker: MasteryTracker (answer recording, competency-targeted exercises)
"""

from chemtask.mastery.state_store import BktStateStore, InMemoryBktStateStore, SQLiteBktStateStore
from chemtask.mastery.tracker import MasteryTracker

__all__ = [
    "BktStateStore",
    "InMemoryBktStateStore",
    "MasteryTracker",
    "SQLiteBktStateStore",
]
