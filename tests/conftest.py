# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures for Boltic SDK tests.

Clients built here talk to a :class:`~boltic_sdk.testing.MockTransport`, never
to the network, and have retries disabled.
"""

import pytest

from boltic_sdk.core.auth import AuthConfig, AuthManager
from boltic_sdk.core.config import ClientConfig
from boltic_sdk.core.http import HttpClient
from boltic_sdk.testing import TEST_API_KEY, MockTransport, create_test_client


@pytest.fixture
def api_key():
    return TEST_API_KEY


@pytest.fixture
def test_config():
    """Local configuration with safe defaults."""
    return ClientConfig.for_environment("local", retry_attempts=0, retry_delay=10, debug=False)


@pytest.fixture
def auth(api_key):
    return AuthManager(AuthConfig(api_key=api_key))


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def http_client(test_config, auth, transport):
    client = HttpClient(test_config, auth, transport=transport)
    yield client
    client.close()


@pytest.fixture
def client(transport):
    c = create_test_client(transport=transport)
    yield c
    c.close()


@pytest.fixture
def sample_table():
    return {"id": "tbl-1", "name": "products", "description": "Product catalog"}


@pytest.fixture
def sample_column():
    return {"id": "fld-1", "name": "price", "type": "currency"}
