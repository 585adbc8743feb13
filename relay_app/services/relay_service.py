# relay_app/services/relay_service.py
# -*- coding: utf-8 -*-
import logging
from typing import Iterator, Optional

from redis import Redis

from . import thread_cache
from .assistant_client import AssistantClient
from .stream_transcoder import transcode
from ..errors import ValidationError

logger = logging.getLogger(__name__)


def resolve_thread(
    client: AssistantClient,
    cache: Redis,
    session_id: Optional[str],
    ttl_seconds: int,
    prefix: str = "",
) -> str:
    """
    Returns the thread for a session, creating and caching a new one on a miss.
    """
    if not session_id:
        raise ValidationError("Session ID required")

    thread_id = thread_cache.get_thread_id(cache, session_id, prefix)
    if thread_id:
        return thread_id

    logger.info(f"No cached thread for session {session_id}. Creating a new one.",
                extra={"session_id": session_id})
    thread_id = client.create_thread()
    thread_cache.store_thread_id(cache, session_id, thread_id, ttl_seconds, prefix)
    return thread_id


class RunStream:
    """
    Iterable handed to Flask as the response body.

    Werkzeug calls ``close()`` when the response is done, even if no frame
    was ever pulled; the upstream run response is closed exactly once on
    every path.
    """

    def __init__(self, upstream):
        self.upstream = upstream
        self._upstream_closed = False
        self._frames = transcode(upstream.iter_content(chunk_size=None), close=self._close_upstream)

    def _close_upstream(self) -> None:
        if self._upstream_closed:
            return
        self._upstream_closed = True
        self.upstream.close()

    def __iter__(self) -> Iterator[bytes]:
        return self._frames

    def close(self) -> None:
        self._frames.close()
        self._close_upstream()


def open_stream(
    client: AssistantClient,
    cache: Redis,
    session_id: Optional[str],
    user_input: Optional[str],
    ttl_seconds: int,
    prefix: str = "",
) -> RunStream:
    """
    Runs resolve -> submit -> start run, and returns the transcoded stream.

    Everything up to the start of the run happens eagerly, so any failure is
    raised here, before a response has been started.
    """
    thread_id = resolve_thread(client, cache, session_id, ttl_seconds, prefix)
    client.add_message(thread_id, user_input or "")
    return RunStream(client.start_run(thread_id))
