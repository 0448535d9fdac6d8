import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Suppress verbose PyMongo driver logs
logging.getLogger('pymongo').setLevel(logging.WARNING)

USERS_COLLECTION_NAME = 'users'
NOTES_COLLECTION_NAME = 'notes'

_client_cache: MongoClient | None = None
_connected_once = False


def reset_client():
    global _client_cache
    if _client_cache is not None:
        _client_cache.close()
    _client_cache = None


def get_mongodb_client(mongo_uri: str) -> MongoClient | None:
    """Get MongoDB client with connection caching and reconnection logic.

    Connection strategy:
    1. Return cached client if healthy (ping succeeds)
    2. Otherwise build a new client and ping it
    3. Return None while the server is unreachable; the next call retries

    Returns:
        MongoDB client or None if connection fails
    """
    global _client_cache, _connected_once

    if _client_cache:
        try:
            _client_cache.admin.command('ping')
            return _client_cache
        except PyMongoError:
            _client_cache = None
            logger.debug("[MONGODB] Cached client failed ping, attempting reconnection...")

    try:
        client = MongoClient(
            mongo_uri,
            tz_aware=True,  # timestamps come back as UTC-aware datetimes
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            maxPoolSize=10,
            minPoolSize=0,
            maxIdleTimeMS=30000,
            waitQueueTimeoutMS=10000,
            retryWrites=True,
            retryReads=True,
        )
        client.admin.command('ping')
    except (ConnectionFailure, PyMongoError) as e:
        logger.error(f"[MONGODB] Connection failed: {str(e)[:200]}")
        return None

    if not _connected_once:
        logger.info("[MONGODB] Connected successfully")
        _connected_once = True

    _client_cache = client
    return client
