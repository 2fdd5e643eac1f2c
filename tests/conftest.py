from __future__ import annotations

import pytest

from herald.config import ProviderConfig
from herald.dispatcher import Dispatcher
from herald.providers import FirebaseProvider, SendGridProvider, TwilioProvider
from herald.registry import ProviderRegistry


@pytest.fixture
def sendgrid() -> SendGridProvider:
    return SendGridProvider(ProviderConfig(api_key="test-api-key"))


@pytest.fixture
def twilio() -> TwilioProvider:
    return TwilioProvider(ProviderConfig(account_id="test-account", auth_token="test-token"))


@pytest.fixture
def firebase() -> FirebaseProvider:
    return FirebaseProvider(ProviderConfig(api_key="test-firebase-key", properties={"project_id": "test-project"}))


@pytest.fixture
def registry(sendgrid, twilio, firebase) -> ProviderRegistry:
    return ProviderRegistry().register(sendgrid).register(twilio).register(firebase)


@pytest.fixture
def dispatcher(registry):
    instance = Dispatcher(registry, pool_size=4)
    yield instance
    instance.shutdown()
