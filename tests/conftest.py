"""Shared fixtures: canned Shopify responses and a mocked HTTP session."""

import json
import os
from unittest.mock import MagicMock

import pytest

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def _load(name):
    with open(os.path.join(FIXTURES_DIR, name)) as f:
        return json.load(f)


def _response(body=None, status_code=200, text=None):
    resp = MagicMock()
    resp.status_code = status_code
    if isinstance(body, Exception):
        resp.json.side_effect = body
        resp.text = text or ""
    else:
        resp.json.return_value = body
        resp.text = text if text is not None else json.dumps(body)
    return resp


@pytest.fixture
def load_fixture():
    """Load a full JSON response body from tests/fixtures."""
    return _load


@pytest.fixture
def make_response():
    """Build a fake requests.Response with a status code and JSON body."""
    return _response


@pytest.fixture
def session():
    """A mock requests.Session; queue responses on session.post.side_effect."""
    return MagicMock()


@pytest.fixture
def sleep():
    """Records backoff/throttle waits instead of sleeping."""
    return MagicMock()
