"""
Constants and enums for the crawler data store
"""

from enum import Enum
from typing import Dict, Tuple


# Fixed database written by the crawler
DATABASE_NAME = "crawler_data"


class Collection(str, Enum):
    """Collections exposed by the data layer"""
    SITE_STATES = "site_states"
    URL_STATES = "url_states"
    DAILY_STATS = "daily_stats"
    PERFORMANCE_HISTORY = "performance_history"
    AUDIT_LOG = "audit_log"
    PAGE_CHANGES = "page_changes"


class PageCountMode(Enum):
    """How site page totals are computed"""
    LIVE = "live"          # count url_states per site
    ESTIMATE = "estimate"  # read site_states.total_pages_estimate


# Fields read from site_states by the estimate summary
SITE_SUMMARY_FIELDS: Tuple[str, ...] = (
    "site_id",
    "total_pages_estimate",
    "current_cycle",
    "is_first_cycle",
    "cycle_start_time",
    "updated_at",
)

SITE_SUMMARY_PROJECTION: Dict[str, int] = {
    "_id": 0,
    **{name: 1 for name in SITE_SUMMARY_FIELDS},
}
