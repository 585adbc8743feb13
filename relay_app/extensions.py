import requests
from flask import current_app
from redis import Redis


def get_redis_client() -> Redis:
    """Return the app's shared Redis client, creating it on first use."""
    client = getattr(current_app, "redis_client", None)
    if client is None:
        client = Redis.from_url(current_app.config["REDIS_URL"], decode_responses=True)
        current_app.redis_client = client
    return client


def get_http_session() -> requests.Session:
    """Return the app's shared provider session so connections are pooled across requests."""
    session = getattr(current_app, "http_session", None)
    if session is None:
        session = requests.Session()
        current_app.http_session = session
    return session
