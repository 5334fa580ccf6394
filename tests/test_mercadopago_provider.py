import dataclasses

import mercadopago
import pytest
import requests

from conftest import TEST_ACCESS_TOKEN
from menucom_shared.config import ConfigurationError, load_config
from menucom_shared.models import Order, Payer
from menucom_shared.services.payment_providers import (
    MercadoPagoClient,
    MercadoPagoCredentials,
    PaymentProviderError,
    build_client,
    get_payment_gateway,
)
from menucom_shared.services.payment_providers.mercadopago_provider import (
    MercadoPagoPaymentGateway,
    MercadoPagoPreferenceGateway,
    remove_empty,
)
from menucom_shared.services.preference_service import build_preference_request
from menucom_shared.validation import InvalidOrderError


@pytest.fixture
def order():
    return Order.from_payload(
        [
            {"id": "sku-1", "name": "Pizza", "price": 100, "quantity": 2},
            {"id": "sku-2", "name": "Agua", "price": "5", "quantity": 1},
        ],
        external_reference="order-42",
    )


@pytest.fixture
def make_client(make_sdk):
    def _make(result=None, error=None):
        sdk, resource = make_sdk(result=result, error=error)
        client = MercadoPagoClient(
            credentials=MercadoPagoCredentials(access_token=TEST_ACCESS_TOKEN),
            sdk=sdk,
            timeout_seconds=5.0,
        )
        return client, resource

    return _make


@pytest.mark.parametrize("token", ["", "   "])
def test_build_client_requires_access_token(config, token):
    with pytest.raises(ConfigurationError, match="Access Token"):
        build_client(dataclasses.replace(config, mp_access_token=token))


def test_build_client_wraps_sdk(config):
    client = build_client(config)

    assert isinstance(client.sdk, mercadopago.SDK)
    assert client.credentials.access_token == TEST_ACCESS_TOKEN
    assert client.sandbox is False
    assert TEST_ACCESS_TOKEN not in repr(client)


def test_build_client_bounds_timeout_without_retries(config):
    client = build_client(config)

    assert client.sdk.request_options.connection_timeout == 5.0
    assert client.sdk.request_options.max_retries == 0
    assert client.timeout_seconds == 5.0


def test_build_client_uses_configured_timeout(clean_env):
    clean_env.setenv("MP_ACCESS_TOKEN", TEST_ACCESS_TOKEN)
    clean_env.setenv("MP_TIMEOUT_SECONDS", "2.5")

    client = build_client(load_config("menucom-payments-test"))

    assert client.sdk.request_options.connection_timeout == 2.5
    assert client.sdk.request_options.max_retries == 0


def test_credentials_scrub_token_from_messages():
    credentials = MercadoPagoCredentials(access_token="APP_USR-123")

    assert credentials.scrub("invalid token APP_USR-123") == "invalid token ***"
    assert "APP_USR-123" not in repr(credentials)


def test_preference_gateway_maps_response_id(config, order, make_client):
    client, resource = make_client(
        result={"status": 201, "response": {"id": "abc123", "collector_id": 99}}
    )
    gateway = MercadoPagoPreferenceGateway(client)

    result = gateway.create(build_preference_request(order, config))

    assert result.to_dict() == {"id": "abc123"}
    assert result.provider == "mercadopago"


def test_preference_gateway_body(config, order, make_client):
    client, resource = make_client(result={"status": 201, "response": {"id": "abc123"}})
    payer = Payer(email="ana@example.com", name="Ana")

    MercadoPagoPreferenceGateway(client).create(build_preference_request(order, config, payer))

    body = resource.bodies[0]
    assert body["items"][0] == {
        "id": "sku-1",
        "title": "Pizza",
        "quantity": 2,
        "currency_id": "ARS",
        "unit_price": 109.92,
        "category_id": "services",
    }
    assert body["items"][1]["unit_price"] == 5.5
    assert body["external_reference"] == "order-42"
    assert body["payer"] == {"email": "ana@example.com", "name": "Ana", "first_name": "Ana"}
    assert body["payment_methods"] == {
        "excluded_payment_types": [{"id": "ticket"}, {"id": "bank_transfer"}]
    }
    assert body["statement_descriptor"] == "menucom_buy"
    assert "back_urls" not in body
    assert "auto_return" not in body
    assert "notification_url" not in body


def test_preference_gateway_sets_auto_return_with_back_urls(config, order, make_client):
    client, resource = make_client(result={"status": 201, "response": {"id": "abc123"}})
    config = dataclasses.replace(config, mp_back_url="https://menu.example.com")

    MercadoPagoPreferenceGateway(client).create(build_preference_request(order, config))

    body = resource.bodies[0]
    assert body["auto_return"] == "approved"
    assert body["back_urls"]["success"].startswith("https://menu.example.com/")


def test_provider_error_status_is_reported(config, order, make_client):
    client, _ = make_client(
        result={"status": 400, "response": {"message": "invalid unit_price", "status": 400}}
    )

    with pytest.raises(PaymentProviderError, match="invalid unit_price") as excinfo:
        MercadoPagoPreferenceGateway(client).create(build_preference_request(order, config))

    assert excinfo.value.status_code == 400


def test_provider_timeout_becomes_provider_error(config, order, make_client):
    client, _ = make_client(error=requests.exceptions.ReadTimeout("read timed out"))

    with pytest.raises(PaymentProviderError, match="Timeout"):
        MercadoPagoPreferenceGateway(client).create(build_preference_request(order, config))


def test_connection_error_becomes_provider_error(config, order, make_client):
    client, _ = make_client(error=requests.exceptions.ConnectionError("refused"))

    with pytest.raises(PaymentProviderError, match="No se pudo conectar"):
        MercadoPagoPreferenceGateway(client).create(build_preference_request(order, config))


def test_provider_error_never_leaks_access_token(config, order, make_client):
    client, _ = make_client(error=RuntimeError(f"unauthorized token {TEST_ACCESS_TOKEN}"))

    with pytest.raises(PaymentProviderError) as excinfo:
        MercadoPagoPreferenceGateway(client).create(build_preference_request(order, config))

    assert TEST_ACCESS_TOKEN not in str(excinfo.value)


def test_missing_id_in_response_is_an_error(config, order, make_client):
    client, _ = make_client(result={"status": 201, "response": {}})

    with pytest.raises(PaymentProviderError, match="identificador"):
        MercadoPagoPreferenceGateway(client).create(build_preference_request(order, config))


def test_payment_gateway_body_and_id(config, order, make_client):
    client, resource = make_client(result={"status": 201, "response": {"id": 123456789}})
    request = build_preference_request(
        order, config, Payer(email="ana@example.com"), payment_method_id="pix"
    )

    result = MercadoPagoPaymentGateway(client).create(request)

    assert result.id == "123456789"
    body = resource.bodies[0]
    assert body["transaction_amount"] == 225.34
    assert body["description"] == "Pizza, Agua"
    assert body["payment_method_id"] == "pix"
    assert body["payer"] == {"email": "ana@example.com"}
    assert len(body["additional_info"]["items"]) == 2


def test_payment_gateway_requires_payer_email(config, order, make_client):
    client, resource = make_client(result={"status": 201, "response": {"id": 1}})
    request = build_preference_request(order, config, payment_method_id="pix")

    with pytest.raises(InvalidOrderError, match="email"):
        MercadoPagoPaymentGateway(client).create(request)

    assert resource.bodies == []


def test_get_payment_gateway_by_mode(make_client):
    client, _ = make_client()

    assert isinstance(get_payment_gateway("preference", client), MercadoPagoPreferenceGateway)
    assert isinstance(get_payment_gateway(" PAYMENT ", client), MercadoPagoPaymentGateway)
    with pytest.raises(ConfigurationError, match="no soportado"):
        get_payment_gateway("cash", client)


def test_remove_empty_drops_blank_values():
    assert remove_empty(
        {"a": "", "b": None, "c": [], "d": {"e": " "}, "f": 0, "g": [{"id": "x"}, {}]}
    ) == {"f": 0, "g": [{"id": "x"}]}
