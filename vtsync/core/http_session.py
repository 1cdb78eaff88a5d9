"""Pooled HTTP sessions for platform API clients."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

_sessions: dict[str, requests.Session] = {}


def get_session(name: str, max_retries: int = 0, backoff_factor: float = 0.5) -> requests.Session:
    """
    Get or create the cached JSON API session ``name``.

    Args:
        name: Session key, one per platform API
        max_retries: Transport-level retries; 0 leaves failures to the caller
        backoff_factor: Delay factor between retries

    Returns:
        Shared requests.Session
    """
    session = _sessions.get(name)
    if session is not None:
        return session

    adapter = HTTPAdapter(
        max_retries=Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
    )
    session = requests.Session()
    session.mount("https://", adapter)
    session.headers.update({"Accept": "application/json"})

    _sessions[name] = session
    return session


def close_all_sessions() -> None:
    """Close every cached session."""
    while _sessions:
        _, session = _sessions.popitem()
        session.close()
