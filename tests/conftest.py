"""
Shared fixtures: a scripted stand-in for the CovenantSQL adapter.

The adapter is plugged into the driver through ``httpx.MockTransport``, so no
test touches the network.

Usage:
    def test_query(adapter, statement):
        adapter.reply({'success': True, 'data': {'rows': [{'id': 1}]}})
        rs = statement.execute_query('SELECT id FROM users')
"""
import json

import httpx
import pytest

import covenantsql

DATABASE = 'e1c4e80701773c1656a99d317148f2eada0fc6f2dad33afd5425e65bc9a35270'
HOST = '127.0.0.1'
PORT = 11105


class FakeAdapter:
    """Replies to each request with the next scripted response."""

    def __init__(self):
        self.requests = []
        self._replies = []

    def reply(self, body, status_code=200):
        """Queue a response. ``body`` may be JSON data, raw text, or an exception to raise."""
        self._replies.append((status_code, body))

    def rows(self, rows, **data):
        self.reply({'success': True, 'status': 'ok', 'data': {'rows': rows, **data}})

    def affected(self, count):
        self.reply({'success': True, 'status': 'ok', 'data': {'affected_rows': count}})

    def fail(self, status, status_code=200):
        self.reply({'success': False, 'status': status}, status_code)

    def handler(self, request):
        self.requests.append(request)
        status_code, body = self._replies.pop(0)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)

    @property
    def last_request(self):
        return self.requests[-1]

    @property
    def last_body(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture
def connection(adapter):
    conn = covenantsql.connect(
        database=DATABASE,
        host=HOST,
        port=PORT,
        transport=httpx.MockTransport(adapter.handler),
    )
    yield conn
    conn.close()


@pytest.fixture
def statement(connection):
    return connection.create_statement()


@pytest.fixture
def five_rows():
    return [{'id': i, 'email': f'user{i}@example.com'} for i in range(1, 6)]
