from unittest.mock import MagicMock

import pytest

from relay_app.errors import ConfigurationError, UpstreamError
from relay_app.services.assistant_client import AssistantClient

from conftest import FakeResponse


def make_client(**kwargs):
    http = MagicMock()
    client = AssistantClient(
        api_key="sk-test",
        assistant_id="asst_test",
        api_base="https://api.test/v1/",
        session=http,
        **kwargs,
    )
    return client, http


def test_missing_api_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError) as exc_info:
        AssistantClient(api_key=None, assistant_id="asst_test")
    assert str(exc_info.value) == "OPENAI_API_KEY not set"


def test_create_thread_posts_with_auth_and_beta_headers():
    client, http = make_client()
    http.post.return_value = FakeResponse(json_body={"id": "thread_abc"})

    assert client.create_thread() == "thread_abc"

    args, kwargs = http.post.call_args
    assert args[0] == "https://api.test/v1/threads"
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["headers"]["OpenAI-Beta"] == "assistants=v1"
    assert "Content-Type" not in kwargs["headers"]
    assert kwargs["json"] is None


def test_create_thread_failure_carries_status_and_body():
    client, http = make_client()
    http.post.return_value = FakeResponse(status_code=401, text="invalid key")

    with pytest.raises(UpstreamError) as exc_info:
        client.create_thread()

    assert exc_info.value.status_code == 401
    assert exc_info.value.body == "invalid key"
    assert str(exc_info.value) == "Thread creation failed: 401 invalid key"


def test_add_message_sends_user_role_and_empty_content():
    client, http = make_client()
    http.post.return_value = FakeResponse(json_body={"id": "msg_1"})

    client.add_message("thread_abc", "")

    args, kwargs = http.post.call_args
    assert args[0] == "https://api.test/v1/threads/thread_abc/messages"
    assert kwargs["json"] == {"role": "user", "content": ""}
    assert kwargs["headers"]["Content-Type"] == "application/json"


def test_add_message_failure_raises():
    client, http = make_client()
    http.post.return_value = FakeResponse(status_code=404, text="no thread")

    with pytest.raises(UpstreamError) as exc_info:
        client.add_message("thread_abc", "hi")

    assert str(exc_info.value) == "Message addition failed: 404 no thread"


def test_start_run_requests_streaming_with_configured_assistant():
    client, http = make_client(beta_header="assistants=v2")
    upstream = FakeResponse(chunks=[b"data: [DONE]\n"])
    http.post.return_value = upstream

    assert client.start_run("thread_abc") is upstream

    args, kwargs = http.post.call_args
    assert args[0] == "https://api.test/v1/threads/thread_abc/runs"
    assert kwargs["json"] == {"assistant_id": "asst_test", "stream": True}
    assert kwargs["stream"] is True
    assert kwargs["headers"]["OpenAI-Beta"] == "assistants=v2"
    assert upstream.close_calls == 0


def test_start_run_failure_closes_response():
    client, http = make_client()
    upstream = FakeResponse(status_code=500, text="server exploded")
    http.post.return_value = upstream

    with pytest.raises(UpstreamError) as exc_info:
        client.start_run("thread_abc")

    assert str(exc_info.value) == "Run creation failed: 500 server exploded"
    assert upstream.close_calls == 1


def test_from_config_reads_flask_style_mapping():
    client = AssistantClient.from_config({
        "OPENAI_API_KEY": "sk-x",
        "OPENAI_ASSISTANT_ID": "asst_x",
        "OPENAI_API_BASE": "https://example.test/v1",
        "OPENAI_BETA_HEADER": "assistants=v1",
        "OPENAI_REQUEST_TIMEOUT": 5,
    })

    assert client.assistant_id == "asst_x"
    assert client.api_base == "https://example.test/v1"
    assert client.timeout == 5
