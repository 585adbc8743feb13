# relay_app/services/assistant_client.py
# -*- coding: utf-8 -*-
import logging
from typing import Dict, Optional, Any

import requests

from ..errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class AssistantClient:
    """
    Thin HTTP client for the provider's threads/messages/runs endpoints.

    Raw ``requests`` calls are used instead of the SDK because the run stream
    has to be relayed byte for byte.
    """

    def __init__(
        self,
        api_key: Optional[str],
        assistant_id: str,
        api_base: str = "https://api.openai.com/v1",
        beta_header: str = "assistants=v1",
        timeout: float = 60,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY not set")

        self.api_key = api_key
        self.assistant_id = assistant_id
        self.api_base = api_base.rstrip("/")
        self.beta_header = beta_header
        self.timeout = timeout
        self.http = session or requests.Session()

    def _headers(self, json_body: bool = True) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "OpenAI-Beta": self.beta_header,
        }
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _post(self, path: str, payload: Optional[Dict[str, Any]] = None, stream: bool = False) -> requests.Response:
        url = f"{self.api_base}{path}"
        logger.debug(f"POST {url} (stream={stream})")
        return self.http.post(
            url,
            headers=self._headers(json_body=payload is not None),
            json=payload,
            stream=stream,
            timeout=self.timeout,
        )

    def create_thread(self) -> str:
        res = self._post("/threads")
        if not res.ok:
            raise UpstreamError("Thread creation", res.status_code, res.text)
        thread_id = res.json()["id"]
        logger.info(f"Created new thread '{thread_id}'.", extra={"thread_id": thread_id})
        return thread_id

    def add_message(self, thread_id: str, content: str) -> None:
        res = self._post(f"/threads/{thread_id}/messages", {"role": "user", "content": content})
        if not res.ok:
            raise UpstreamError("Message addition", res.status_code, res.text)
        logger.debug(f"Added user message ({len(content)} chars) to thread '{thread_id}'.",
                     extra={"thread_id": thread_id})

    def start_run(self, thread_id: str) -> requests.Response:
        """
        Starts a streaming run. The caller owns the returned response and must
        close it once the body has been consumed.
        """
        res = self._post(
            f"/threads/{thread_id}/runs",
            {"assistant_id": self.assistant_id, "stream": True},
            stream=True,
        )
        if not res.ok:
            try:
                body = res.text
            finally:
                res.close()
            raise UpstreamError("Run creation", res.status_code, body)
        logger.info(f"Started streaming run on thread '{thread_id}' with assistant '{self.assistant_id}'.",
                    extra={"thread_id": thread_id})
        return res

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "AssistantClient":
        return cls(
            api_key=config.get("OPENAI_API_KEY"),
            assistant_id=config.get("OPENAI_ASSISTANT_ID"),
            api_base=config.get("OPENAI_API_BASE", "https://api.openai.com/v1"),
            beta_header=config.get("OPENAI_BETA_HEADER", "assistants=v1"),
            timeout=config.get("OPENAI_REQUEST_TIMEOUT", 60),
            session=session,
        )
