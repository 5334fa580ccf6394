import pytest

from menucom_shared.config import load_config
from menucom_shared.services.payment_providers import PreferenceGateway, PreferenceResult

ENV_VARS = (
    "LOG_LEVEL",
    "DEBUG_MODE",
    "CORS_ALLOWED_ORIGINS",
    "MP_ACCESS_TOKEN",
    "MP_SANDBOX_MODE",
    "MP_API_BASE_URL",
    "MP_CHECKOUT_MODE",
    "MP_CURRENCY_ID",
    "MP_SURCHARGE_RATE",
    "MP_EXCLUDED_PAYMENT_TYPES",
    "MP_TIMEOUT_SECONDS",
    "MP_ITEM_CATEGORY_ID",
    "MP_STATEMENT_DESCRIPTOR",
    "MP_BACK_URL",
    "MP_CHECKOUT_PATH",
    "MP_NOTIFICATION_URL",
    "MERCADO_PAGO_CLIENT_ID",
    "MERCADO_PAGO_CLIENT_SECRET",
    "MERCADO_PAGO_REDIRECT_URI",
    "MERCADO_PAGO_AUTH_URL",
    "MP_TOKEN_REFRESH_THRESHOLD_MINUTES",
    "MP_TOKEN_DEFAULT_EXPIRATION_HOURS",
)

TEST_ACCESS_TOKEN = "TEST-1234567890-secret-token"


class FakeGateway(PreferenceGateway):
    name = "fake"

    def __init__(self, result_id="abc123", error=None):
        self.result_id = result_id
        self.error = error
        self.requests = []

    def create(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return PreferenceResult(id=self.result_id, provider=self.name)

    def validate_configuration(self):
        return True


class FakeResource:
    """Stands in for mercadopago's Preference/Payment resources."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.bodies = []

    def create(self, body):
        self.bodies.append(body)
        if self.error is not None:
            raise self.error
        return self.result


class FakeSDK:
    def __init__(self, resource):
        self.resource = resource

    def preference(self):
        return self.resource

    def payment(self):
        return self.resource


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def config(clean_env):
    clean_env.setenv("MP_ACCESS_TOKEN", TEST_ACCESS_TOKEN)
    return load_config("menucom-payments-test")


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def make_gateway():
    return FakeGateway


@pytest.fixture
def make_sdk():
    def _make(result=None, error=None):
        resource = FakeResource(result=result, error=error)
        return FakeSDK(resource), resource

    return _make
