"""Match history and score trends.

Public API:
- MatchHistoryTracker: Records scoring runs and serves trends
- MatchHistoryRepository: SQLite storage with composite-key upserts
- MatchHistory: One stored scoring run
- TrendPoint: One point of a score trend
"""

from fitmatch.history.models import MatchHistory, TrendPoint
from fitmatch.history.repository import MatchHistoryRepository
from fitmatch.history.service import MatchHistoryTracker

__all__ = [
    "MatchHistoryTracker",
    "MatchHistoryRepository",
    "MatchHistory",
    "TrendPoint",
]
