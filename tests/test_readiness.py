"""Tests for the blockchain node readiness probe."""

from unittest.mock import MagicMock

import pytest
import requests

from supplychain_deploy.errors import NodeNotReadyError
from supplychain_deploy.readiness import BLOCK_NUMBER_REQUEST, query_block_number, wait_for_node


def _response(status=200, body=None):
    response = MagicMock(status_code=status, text="")
    response.json.return_value = body if body is not None else {}
    return response


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


class TestQueryBlockNumber:
    def test_parses_hex_result(self):
        session = MagicMock()
        session.post.return_value = _response(body={"jsonrpc": "2.0", "id": 1, "result": "0x1b4"})

        assert query_block_number("http://node:8545", session=session) == 436
        session.post.assert_called_once_with("http://node:8545", json=BLOCK_NUMBER_REQUEST, timeout=10.0)

    def test_connection_error(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")

        assert query_block_number("http://node:8545", session=session) is None

    def test_non_200(self):
        session = MagicMock()
        session.post.return_value = _response(status=502)

        assert query_block_number("http://node:8545", session=session) is None

    def test_body_without_result(self):
        session = MagicMock()
        session.post.return_value = _response(body={"error": {"code": -32601}})

        assert query_block_number("http://node:8545", session=session) is None


class TestWaitForNode:
    def test_returns_once_mining(self):
        clock = FakeClock()
        session = MagicMock()
        session.post.side_effect = [
            requests.ConnectionError("refused"),
            _response(body={"result": "0x0"}),
            _response(body={"result": "0x5"}),
        ]

        block = wait_for_node("http://node:8545", session=session, sleep=clock.sleep, clock=clock)

        assert block == 5
        assert session.post.call_count == 3
        # 5s then 10s backoff
        assert clock.now == 15.0

    def test_backoff_is_capped(self):
        clock = FakeClock()
        sleeps = []

        def sleep(seconds):
            sleeps.append(seconds)
            clock.sleep(seconds)

        session = MagicMock()
        session.post.side_effect = [_response(body={"result": "0x0"})] * 5 + [_response(body={"result": "0x1"})]

        wait_for_node("http://node:8545", timeout=500, max_delay=30, session=session, sleep=sleep, clock=clock)

        assert sleeps == [5.0, 10.0, 20.0, 30.0, 30.0]

    def test_times_out(self):
        clock = FakeClock()
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NodeNotReadyError, match="not ready after 60s"):
            wait_for_node("http://node:8545", timeout=60, session=session, sleep=clock.sleep, clock=clock)

        assert clock.now == 60.0
