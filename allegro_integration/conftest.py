import logging
from unittest.mock import MagicMock

import jwt
import pytest

from allegro_integration.audit import AuditLogBuilder
from allegro_integration.config import AllegroConfig

TOKEN_SECRET = "unit-test-signing-secret-with-enough-bytes"


def mint_token(**claims) -> str:
    """Create a signed JWT shaped like an Allegro access token."""
    payload = {"client_id": "test-client", "authorities": ["allegro:api:sale:offers:read"]}
    payload.update(claims)
    return jwt.encode(payload, TOKEN_SECRET, algorithm="HS256")


@pytest.fixture
def config():
    return AllegroConfig(client_id="test-client", client_secret="test-secret")


@pytest.fixture
def audit_logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def builder(config, audit_logger):
    return AuditLogBuilder(config, audit_logger)


@pytest.fixture
def seller_token():
    return mint_token(user_name="12345")


@pytest.fixture
def make_token():
    return mint_token
