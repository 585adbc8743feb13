# relay_app/services/stream_transcoder.py
# -*- coding: utf-8 -*-
"""
Re-frames the provider's run stream into the simplified event stream the
browser consumes.

Upstream frames are newline separated. Only ``data: `` lines matter: either
``[DONE]`` or a JSON object. JSON frames whose ``event`` is
``thread.message.delta`` are forwarded as ``data: {"delta": ...}``; everything
else is dropped.
"""
import codecs
import json
import logging
from typing import Callable, Iterable, Iterator, Optional

from ..errors import StreamTranscodeError

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_TOKEN = "[DONE]"
DELTA_EVENT = "thread.message.delta"

DONE_FRAME = b"data: [DONE]\n\n"


def encode_frame(payload: dict) -> bytes:
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    # Lone surrogates (half of a split emoji) are written as \uXXXX escapes,
    # which is still valid inside a JSON string.
    return f"{DATA_PREFIX}{body}\n\n".encode("utf-8", errors="backslashreplace")


ERROR_FRAME = encode_frame({"error": "Stream error"})


def _delta_payload(event) -> Optional[dict]:
    """
    Picks the downstream payload out of a parsed upstream event. A delta
    event whose ``data`` has no ``delta`` still yields an (empty) frame.
    """
    if not isinstance(event, dict) or event.get("event") != DELTA_EVENT:
        return None
    data = event.get("data")
    if data is None:
        raise KeyError("data")
    if isinstance(data, dict) and "delta" in data:
        return {"delta": data["delta"]}
    return {}


def _delta_frame(line: str) -> Optional[bytes]:
    """Returns the downstream frame for one upstream ``data:`` line, if any."""
    json_str = line[len(DATA_PREFIX):].strip()
    if not json_str:
        return None

    try:
        payload = _delta_payload(json.loads(json_str))
    except (ValueError, KeyError) as e:
        logger.warning(f"Skipping unparseable upstream frame: {e} (frame: {json_str[:200]!r})")
        return None

    if payload is None:
        return None
    return encode_frame(payload)


def transcode(chunks: Iterable[bytes], close: Optional[Callable[[], None]] = None) -> Iterator[bytes]:
    """
    Yields downstream frames while reading ``chunks`` one at a time.

    A terminal ``data: [DONE]`` frame is always produced. ``close`` is called
    exactly once, however the generator ends (exhausted, failed, or closed
    early by the WSGI server when the client goes away).
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""
    run_completed = False

    try:
        try:
            for chunk in chunks:
                if not chunk:
                    continue
                buffer += decoder.decode(chunk)
                lines = buffer.split("\n")
                buffer = lines.pop()

                for line in lines:
                    if DONE_TOKEN in line:
                        # Keep reading: upstream may still send trailing frames.
                        run_completed = True
                        yield DONE_FRAME
                        continue

                    if line.startswith(DATA_PREFIX):
                        frame = _delta_frame(line)
                        if frame is not None:
                            yield frame

            buffer += decoder.decode(b"", final=True)
            if buffer:
                logger.debug(f"Discarding unterminated trailing fragment ({len(buffer)} chars).")

            if not run_completed:
                yield DONE_FRAME
        except Exception as e:
            error = e if isinstance(e, StreamTranscodeError) else StreamTranscodeError(str(e))
            logger.error(f"Stream error: {error}", exc_info=True)
            yield ERROR_FRAME
            yield DONE_FRAME
    finally:
        if close is not None:
            close()
