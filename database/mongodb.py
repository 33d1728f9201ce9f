"""
MongoDB access for the crawler dashboard
Read-only accessors over the crawler_data database
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import motor.motor_asyncio
from pymongo.errors import PyMongoError

from config import (
    MONGODB_URI, MONGODB_REUSE_ACROSS_RELOADS, MONGODB_POOL_SIZE,
    MONGODB_MIN_POOL_SIZE, MONGODB_MAX_IDLE_TIME, MONGODB_CONNECT_TIMEOUT,
    MONGODB_SERVER_SELECTION_TIMEOUT
)
from core.constants import (
    DATABASE_NAME, Collection, PageCountMode, SITE_SUMMARY_PROJECTION
)
from core.models import SiteSummary
from core.utils import get_logger

logger = get_logger(__name__)

# Pending connections keyed by URI. reload() re-runs this module in the same
# namespace, so the existing dict is picked up instead of a fresh one.
_shared_connections: Dict[str, "asyncio.Future"] = globals().get("_shared_connections", {})


class ConnectionManager:
    """Owns the one MongoDB client of the process"""

    def __init__(self, uri: str, reuse_across_reloads: bool = False,
                 client_factory: Callable[..., Any] = motor.motor_asyncio.AsyncIOMotorClient,
                 **client_options):
        self.uri = uri
        self.reuse_across_reloads = reuse_across_reloads
        self._client_factory = client_factory
        self._client_options = client_options
        self._connection: Optional[asyncio.Future] = None

    def _pending(self) -> "asyncio.Future":
        """Return the in-flight connection, starting it on first use.

        Runs without awaiting, so the first caller always wins and concurrent
        callers share its future.
        """
        if self.reuse_across_reloads:
            connection = _shared_connections.get(self.uri)
            # a loop shutting down cancels the connect, start over on the next call
            if connection is None or connection.cancelled():
                connection = asyncio.ensure_future(self._connect())
                _shared_connections[self.uri] = connection
            return connection

        if self._connection is None or self._connection.cancelled():
            self._connection = asyncio.ensure_future(self._connect())
        return self._connection

    async def _connect(self):
        """Create the client and wait for the server to answer"""
        client = self._client_factory(self.uri, **self._client_options)
        await client.admin.command('ping')
        logger.info(f"✅ Connected to MongoDB (reuse across reloads: {self.reuse_across_reloads})")
        return client

    async def get_client(self):
        """Get the shared client, connecting on first call"""
        # one caller being cancelled must not cancel everyone else's connection
        return await asyncio.shield(self._pending())

    async def ping(self) -> bool:
        """Check database connection"""
        try:
            client = await self.get_client()
            await client.admin.command('ping')
            return True
        except PyMongoError:
            return False

    async def close(self) -> None:
        """Close the client and forget it, the next call reconnects"""
        if self.reuse_across_reloads:
            connection = _shared_connections.pop(self.uri, None)
        else:
            connection, self._connection = self._connection, None

        if connection is None or connection.cancelled():
            return

        # let a pending connect finish so its waiters get the client and it is not leaked
        try:
            client = await asyncio.shield(connection)
        except PyMongoError:
            return

        client.close()
        logger.info("🔌 Disconnected from MongoDB")


class CrawlerDatabase:
    """Accessors for the crawler_data collections"""

    def __init__(self, connection: ConnectionManager):
        self.connection = connection

    async def get_client(self):
        return await self.connection.get_client()

    async def get_database(self):
        client = await self.connection.get_client()
        return client[DATABASE_NAME]

    async def _collection(self, collection: Collection):
        db = await self.get_database()
        return db[collection.value]

    # ============== COLLECTIONS ==============

    async def get_site_states(self):
        return await self._collection(Collection.SITE_STATES)

    async def get_url_states(self):
        return await self._collection(Collection.URL_STATES)

    async def get_daily_stats(self):
        return await self._collection(Collection.DAILY_STATS)

    async def get_performance_history(self):
        return await self._collection(Collection.PERFORMANCE_HISTORY)

    async def get_audit_log(self):
        return await self._collection(Collection.AUDIT_LOG)

    async def get_page_changes(self):
        return await self._collection(Collection.PAGE_CHANGES)

    # ============== SITE SUMMARIES ==============

    async def get_all_sites(self) -> List[SiteSummary]:
        """List every site in site_states with its live url_states count.

        Site ids are returned in dashboard form (hyphens). Counts match the
        stored id exactly. Sorted by page count, largest first.
        """
        site_states = await self.get_site_states()
        states = await site_states.find({}).to_list(length=None)

        url_states = await self.get_url_states()
        counts = await asyncio.gather(*(
            url_states.count_documents({"site_id": state.get("site_id")})
            for state in states
        ))

        sites = [
            SiteSummary.from_site_state(state, total_pages)
            for state, total_pages in zip(states, counts)
        ]
        return sorted(sites, key=lambda site: site.total_pages, reverse=True)

    async def get_all_sites_estimated(self) -> List[SiteSummary]:
        """List every site using the crawler's stored total_pages_estimate.

        Ids are returned as stored. Sorted by page count, largest first.
        """
        site_states = await self.get_site_states()
        cursor = site_states.find({}, SITE_SUMMARY_PROJECTION)
        states = await cursor.to_list(length=None)

        sites = [SiteSummary.from_estimate(state) for state in states]
        return sorted(sites, key=lambda site: site.total_pages, reverse=True)

    async def list_sites(self, mode: PageCountMode = PageCountMode.LIVE) -> List[SiteSummary]:
        """Get site summaries counted the given way"""
        if mode is PageCountMode.ESTIMATE:
            return await self.get_all_sites_estimated()
        return await self.get_all_sites()

    # ============== HEALTH CHECK ==============

    async def ping(self) -> bool:
        return await self.connection.ping()

    async def get_db_stats(self) -> Dict[str, Any]:
        """Get database statistics"""
        db = await self.get_database()
        db_stats = await db.command("dbStats")

        collection_stats = {}
        for collection in Collection:
            collection_stats[collection.value] = await db[collection.value].count_documents({})

        return {
            "database": DATABASE_NAME,
            "collections": collection_stats,
            "data_size": db_stats.get("dataSize", 0),
            "storage_size": db_stats.get("storageSize", 0),
            "indexes": db_stats.get("indexes", 0),
            "index_size": db_stats.get("indexSize", 0)
        }


# Global connection and database instance
connection = ConnectionManager(
    MONGODB_URI,
    reuse_across_reloads=MONGODB_REUSE_ACROSS_RELOADS,
    maxPoolSize=MONGODB_POOL_SIZE,
    minPoolSize=MONGODB_MIN_POOL_SIZE,
    maxIdleTimeMS=MONGODB_MAX_IDLE_TIME,
    connectTimeoutMS=MONGODB_CONNECT_TIMEOUT,
    serverSelectionTimeoutMS=MONGODB_SERVER_SELECTION_TIMEOUT,
)
db = CrawlerDatabase(connection)


# ============== INITIALIZATION ==============

async def init_db():
    """Open the shared connection up front"""
    await db.get_client()


async def close_db():
    """Close database connection"""
    await connection.close()
