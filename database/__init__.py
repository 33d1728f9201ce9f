"""
Database Package - crawler_data accessors
"""

from .mongodb import (
    ConnectionManager, CrawlerDatabase, connection, db, init_db, close_db
)

get_client = db.get_client
get_database = db.get_database
get_site_states = db.get_site_states
get_url_states = db.get_url_states
get_daily_stats = db.get_daily_stats
get_performance_history = db.get_performance_history
get_audit_log = db.get_audit_log
get_page_changes = db.get_page_changes
get_all_sites = db.get_all_sites
get_all_sites_estimated = db.get_all_sites_estimated
list_sites = db.list_sites

__all__ = [
    "ConnectionManager", "CrawlerDatabase", "connection", "db", "init_db", "close_db",
    "get_client", "get_database", "get_site_states", "get_url_states",
    "get_daily_stats", "get_performance_history", "get_audit_log",
    "get_page_changes", "get_all_sites", "get_all_sites_estimated", "list_sites",
]
