# relay_app/services/thread_cache.py
import logging
from typing import Optional

from redis import Redis

logger = logging.getLogger(__name__)


def _cache_key(session_id: str, prefix: str = "") -> str:
    return f"{prefix}{session_id}"


def get_thread_id(cache: Redis, session_id: str, prefix: str = "") -> Optional[str]:
    """
    Returns the cached thread_id for a session, or None if absent or expired.
    Expiry is enforced by the cache itself.
    """
    if not session_id:
        return None

    thread_id = cache.get(_cache_key(session_id, prefix))
    if isinstance(thread_id, bytes):
        thread_id = thread_id.decode("utf-8")

    if thread_id:
        logger.info(f"Found cached thread_id '{thread_id}' for session '{session_id}'.",
                    extra={"session_id": session_id, "thread_id": thread_id})
        return thread_id
    return None


def store_thread_id(cache: Redis, session_id: str, thread_id: str, ttl_seconds: int, prefix: str = "") -> None:
    """
    Stores the session -> thread mapping with a TTL. Not atomic: a concurrent
    first request for the same session may overwrite it (last write wins).
    """
    cache.set(_cache_key(session_id, prefix), thread_id, ex=ttl_seconds)
    logger.info(f"Cached thread_id '{thread_id}' for session '{session_id}' (ttl={ttl_seconds}s).",
                extra={"session_id": session_id, "thread_id": thread_id})
