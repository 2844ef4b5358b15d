import json
from unittest.mock import MagicMock

import pytest
import requests

from carrier_registry import CarrierRegistry, build_adapters
from tracker_config import TrackerSettings


def _make_response(payload=None, status_code=200, url='https://carrier.test/track', body=None):
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.reason = 'OK' if status_code < 400 else 'Error'
    if body is not None:
        response._content = body
    else:
        response._content = b'' if payload is None else json.dumps(payload).encode('utf-8')
    response.headers['Content-Type'] = 'application/json'
    return response


@pytest.fixture
def make_response():
    """Build real requests.Response objects carrying a JSON payload."""
    return _make_response


@pytest.fixture
def session():
    """A requests.Session stand-in, configure session.request per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def settings():
    return TrackerSettings(
        dhl_api_key='test-dhl-key',
        ups_client_id='test-client-id',
        ups_client_secret='test-client-secret',
        gls_locale='en',
        http_timeout=5.0,
    )


@pytest.fixture
def registry(session, settings):
    return CarrierRegistry(build_adapters(session, settings))
