#!/usr/bin/env python3
"""
Client for the external agent query service.

The only wire contact is a POST of {"question": ...} to <base>/query;
the JSON body that comes back is returned as-is.
"""
import time
import logging
from typing import Optional, Dict, Any

import requests

from flowcanvas.utils.config import get_config_manager

logger = logging.getLogger(__name__)

MAX_RETRIES_5XX = 3          # retries on transient 5xx (e.g., 502/503/504)
HEADERS = {"Content-Type": "application/json"}


class AgentQueryError(RuntimeError):
    """Raised when the agent service cannot answer a query"""


def backoff_sleep(attempt: int) -> None:
    delay = min(2 ** attempt, 30)
    time.sleep(delay)


def post_json(url: str, payload: Dict[str, Any], timeout: float) -> requests.Response:
    attempt = 0
    while True:
        try:
            r = requests.post(url, headers=HEADERS, json=payload, timeout=timeout)
        except requests.RequestException as e:
            # Network error: retry as a transient failure
            if attempt >= MAX_RETRIES_5XX:
                raise
            attempt += 1
            logger.warning("POST error %s; retrying (%d/%d) ...", e, attempt, MAX_RETRIES_5XX)
            backoff_sleep(attempt)
            continue

        if 500 <= r.status_code < 600:
            if attempt >= MAX_RETRIES_5XX:
                return r
            attempt += 1
            logger.warning("POST %s -> %d; retrying (%d/%d) ...", url, r.status_code, attempt, MAX_RETRIES_5XX)
            backoff_sleep(attempt)
            continue

        return r


def query_agent(question: str, base_url: Optional[str] = None,
                timeout: Optional[float] = None) -> Any:
    """
    Ask the agent service a question.

    Args:
        question: Question text sent as {"question": question}
        base_url: Service base URL (default: configured agent.api_url)
        timeout: Per-request timeout in seconds (default: configured agent.timeout)

    Returns:
        Decoded JSON response body

    Raises:
        AgentQueryError: on transport failure or a non-2xx response
    """
    if base_url is None or timeout is None:
        agent_config = get_config_manager().get_agent_config()
        base_url = base_url or agent_config.api_url
        timeout = timeout if timeout is not None else agent_config.timeout

    url = f"{base_url.rstrip('/')}/query"
    logger.debug("agent query -> %s: %r", url, question)

    try:
        r = post_json(url, {"question": question}, timeout)
    except requests.RequestException as e:
        raise AgentQueryError(f"Failed to post to agent API: {e}") from e

    if not r.ok:
        raise AgentQueryError("Failed to post to agent API")

    try:
        return r.json()
    except ValueError as e:
        raise AgentQueryError(f"Agent API returned invalid JSON: {e}") from e
