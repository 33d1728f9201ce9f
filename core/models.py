"""
Data models for the crawler dashboard
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any


@dataclass
class SiteSummary:
    """Per-site crawl state shown on the dashboard. Built per read, never stored."""

    site_id: str
    total_pages: int = 0
    current_cycle: int = 1
    is_first_cycle: bool = True
    cycle_start_time: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    @classmethod
    def from_site_state(cls, state: Dict[str, Any], total_pages: int) -> 'SiteSummary':
        """Create from a site_states document and a live url_states count"""
        return cls(
            # stored ids use underscores, the dashboard uses hyphens
            site_id=(state.get("site_id") or "").replace("_", "-"),
            total_pages=total_pages,
            current_cycle=state.get("current_cycle") or 1,
            is_first_cycle=state.get("is_first_cycle") is not False,
            cycle_start_time=state.get("cycle_start_time"),
            last_updated=state.get("updated_at"),
        )

    @classmethod
    def from_estimate(cls, state: Dict[str, Any]) -> 'SiteSummary':
        """Create from a projected site_states document using its stored page estimate"""
        return cls(
            site_id=state.get("site_id", ""),
            total_pages=state.get("total_pages_estimate") or 0,
            current_cycle=state.get("current_cycle") or 1,
            # a stored False reads as True here too
            is_first_cycle=bool(state.get("is_first_cycle") or True),
            cycle_start_time=state.get("cycle_start_time"),
            last_updated=state.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dashboard's JSON shape"""
        return {
            "siteId": self.site_id,
            "totalPages": self.total_pages,
            "currentCycle": self.current_cycle,
            "isFirstCycle": self.is_first_cycle,
            "cycleStartTime": self.cycle_start_time,
            "lastUpdated": self.last_updated,
        }
