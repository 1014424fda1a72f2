"""Wait for the blockchain node's JSON-RPC endpoint to come up.

A freshly deployed consortium node accepts TCP connections well before it is
mining. The node counts as ready once ``eth_blockNumber`` reports a block
above zero.
"""
import logging
import time
from typing import Any, Callable

import requests

from .errors import NodeNotReadyError

logger = logging.getLogger(__name__)

BLOCK_NUMBER_REQUEST = {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1}


def query_block_number(rpc_url: str, session: Any = None, timeout: float = 10.0) -> int | None:
    """Return the node's current block number, or None if it is not answering yet."""
    http = session or requests
    try:
        response = http.post(rpc_url, json=BLOCK_NUMBER_REQUEST, timeout=timeout)
    except requests.RequestException as exc:
        logger.debug("RPC endpoint %s not reachable: %s", rpc_url, exc)
        return None

    if response.status_code != 200:
        logger.debug("RPC endpoint %s answered with status %s", rpc_url, response.status_code)
        return None

    try:
        result = response.json().get("result")
        return int(result, 16)
    except (ValueError, TypeError, AttributeError):
        logger.debug("RPC endpoint %s returned an unexpected body: %s", rpc_url, response.text[:200])
        return None


def wait_for_node(
    rpc_url: str,
    timeout: float = 180.0,
    initial_delay: float = 5.0,
    max_delay: float = 30.0,
    backoff: float = 2.0,
    session: Any = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    deadline = clock() + timeout
    delay = initial_delay
    attempt = 0

    while True:
        attempt += 1
        block = query_block_number(rpc_url, session=session)
        if block is not None and block > 0:
            logger.info("Blockchain node at %s is ready (block %d, attempt %d)", rpc_url, block, attempt)
            return block

        remaining = deadline - clock()
        if remaining <= 0:
            raise NodeNotReadyError(
                f"Blockchain node at {rpc_url} was not ready after {timeout:.0f}s ({attempt} attempts)"
            )

        wait = min(delay, max_delay, remaining)
        logger.info("Blockchain node not ready yet, retrying in %.0fs", wait)
        sleep(wait)
        delay *= backoff
