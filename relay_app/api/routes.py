# relay_app/api/routes.py
# -*- coding: utf-8 -*-

import logging

from flask import Response, request, jsonify, current_app
from pydantic import ValidationError as PydanticValidationError

from ..errors import RelayError, ErrorKind, http_status_for, error_payload, kind_for_exception
from ..extensions import get_redis_client, get_http_session
from ..schemas import ChatRequest
from ..services import relay_service
from ..services.assistant_client import AssistantClient

from . import api_bp

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    'Cache-Control': 'no-cache, no-transform',
    'Connection': 'keep-alive',
    'X-Accel-Buffering': 'no',
}


def _error_response(kind: ErrorKind, details: str):
    return jsonify(error_payload(details)), http_status_for(kind) or 500


@api_bp.route('/chat', methods=['POST'])
def handle_chat():
    """
    Resolves the session's thread, posts the user's input and relays the
    assistant's run as a text/event-stream.
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}

    try:
        chat_request = ChatRequest(**body)
        client = AssistantClient.from_config(current_app.config, session=get_http_session())
        stream = relay_service.open_stream(
            client=client,
            cache=get_redis_client(),
            session_id=chat_request.sessionId,
            user_input=chat_request.input,
            ttl_seconds=current_app.config["THREAD_TTL_SECONDS"],
            prefix=current_app.config.get("THREAD_CACHE_PREFIX", ""),
        )
    except RelayError as e:
        logger.error(f"API error ({e.kind.value}): {e.message}")
        return _error_response(e.kind, e.message)
    except PydanticValidationError as e:
        logger.error(f"API error: invalid request body: {e}")
        return _error_response(ErrorKind.VALIDATION, str(e))
    except Exception as e:
        kind = kind_for_exception(e)
        logger.exception(f"API error ({kind.value}): {e}")
        return _error_response(kind, str(e))

    return Response(stream, content_type='text/event-stream', headers=SSE_HEADERS)


@api_bp.route('/health', methods=['GET'])
def health_check():
    """Reports whether the session cache is reachable."""
    logger.debug("Health check endpoint hit.")
    redis_ok = False
    try:
        redis_ok = bool(get_redis_client().ping())
    except Exception as e:
        logger.error(f"Redis health check failed: {e}", exc_info=True)
    return jsonify({"status": "ok", "redis_connected": redis_ok}), 200
