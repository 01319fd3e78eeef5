# backend/tests/test_paypal_verifier.py

import httpx
import pytest

from aiventure.paypal.client import PayPalAuthError, PayPalConfigError, PayPalFetchError
from aiventure.paypal.config import PayPalSettings
from aiventure.paypal.schemas import RejectionReason
from aiventure.paypal.verifier import verify_order


class DummyPayPalClient:
    """
    実際の PayPalClient の代わりに使用するテスト用クライアント。呼び出し順を記録する。
    """

    def __init__(self, order=None, *, token_error=None, fetch_error=None) -> None:
        self.order = order
        self.token_error = token_error
        self.fetch_error = fetch_error
        self.calls = []

    def get_access_token(self):
        self.calls.append("token")
        if self.token_error is not None:
            raise self.token_error
        return "access-token-1"

    def get_order(self, order_id, access_token):
        self.calls.append(("order", order_id, access_token))
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.order


def _settings(**overrides) -> PayPalSettings:
    values = {"client_id": "client-id", "client_secret": "client-secret"}
    values.update(overrides)
    return PayPalSettings(**values)


def _order(
    status="COMPLETED",
    value="49.00",
    currency="USD",
    capture_id="CAPTURE-1",
    email="buyer@example.com",
):
    order = {
        "id": "ORDER-1",
        "status": status,
        "purchase_units": [
            {
                "payments": {
                    "captures": [
                        {
                            "id": capture_id,
                            "amount": {"value": value, "currency_code": currency},
                        }
                    ]
                }
            }
        ],
    }
    if email is not None:
        order["payer"] = {"email_address": email}
    return order


@pytest.mark.parametrize("status", ["CREATED", "APPROVED", "VOIDED", "PAYER_ACTION_REQUIRED"])
def test_rejects_orders_that_are_not_completed(status):
    client = DummyPayPalClient(_order(status=status))

    result = verify_order("ORDER-1", _settings(), client=client)

    assert result.valid is False
    assert result.reason == RejectionReason.STATUS_NOT_COMPLETED
    assert status in result.error


def test_status_is_checked_before_capture():
    order = _order(status="APPROVED")
    order["purchase_units"] = []

    result = verify_order("ORDER-1", _settings(), client=DummyPayPalClient(order))

    assert result.reason == RejectionReason.STATUS_NOT_COMPLETED


def test_rejects_completed_order_without_purchase_units():
    order = _order()
    order["purchase_units"] = []

    result = verify_order("ORDER-1", _settings(), client=DummyPayPalClient(order))

    assert result.valid is False
    assert result.reason == RejectionReason.NO_CAPTURE
    assert result.error == "no payment capture found"


def test_rejects_purchase_unit_without_captures():
    order = _order()
    order["purchase_units"] = [{"payments": {"captures": []}}]

    result = verify_order("ORDER-1", _settings(), client=DummyPayPalClient(order))

    assert result.error == "no payment capture found"


def test_rejects_purchase_unit_without_payments():
    order = _order()
    order["purchase_units"] = [{"reference_id": "default"}]

    result = verify_order("ORDER-1", _settings(), client=DummyPayPalClient(order))

    assert result.error == "no payment capture found"


def test_rejects_capture_without_id():
    result = verify_order("ORDER-1", _settings(), client=DummyPayPalClient(_order(capture_id=None)))

    assert result.valid is False
    assert result.reason == RejectionReason.NO_CAPTURE
    assert result.capture_id is None


def test_rejects_multiple_captures_as_unsupported_shape():
    order = _order()
    captures = order["purchase_units"][0]["payments"]["captures"]
    captures.append({"id": "CAPTURE-2", "amount": {"value": "49.00", "currency_code": "USD"}})

    result = verify_order("ORDER-1", _settings(), client=DummyPayPalClient(order))

    assert result.valid is False
    assert result.reason == RejectionReason.UNSUPPORTED_ORDER_SHAPE


def test_rejects_multiple_purchase_units_as_unsupported_shape():
    order = _order()
    order["purchase_units"].append(_order()["purchase_units"][0])

    result = verify_order("ORDER-1", _settings(), client=DummyPayPalClient(order))

    assert result.reason == RejectionReason.UNSUPPORTED_ORDER_SHAPE


def test_rejects_currency_mismatch():
    result = verify_order(
        "ORDER-1",
        _settings(),
        client=DummyPayPalClient(_order(currency="EUR", value="49.00")),
    )

    assert result.valid is False
    assert result.reason == RejectionReason.CURRENCY_MISMATCH
    assert "EUR" in result.error


@pytest.mark.parametrize("value", ["49.0", "49.00 ", "49", "49.01", "4900"])
def test_rejects_amount_that_is_not_the_exact_fee_literal(value):
    result = verify_order(
        "ORDER-1",
        _settings(),
        client=DummyPayPalClient(_order(value=value)),
    )

    assert result.valid is False
    assert result.reason == RejectionReason.AMOUNT_MISMATCH


def test_accepts_completed_usd_capture_of_exact_fee():
    client = DummyPayPalClient(_order())

    result = verify_order("ORDER-1", _settings(), client=client)

    assert result.valid is True
    assert result.reason is None
    assert result.error is None
    assert result.capture_id == "CAPTURE-1"
    assert result.payer_email == "buyer@example.com"
    assert result.order_id == "ORDER-1"
    assert client.calls == ["token", ("order", "ORDER-1", "access-token-1")]


def test_accepts_order_without_payer_email():
    result = verify_order(
        "ORDER-1",
        _settings(),
        client=DummyPayPalClient(_order(email=None)),
    )

    assert result.valid is True
    assert result.payer_email is None


def test_expected_fee_and_currency_come_from_settings():
    settings = _settings(expected_currency="EUR", expected_fee="19.00")

    ok = verify_order("ORDER-1", settings, client=DummyPayPalClient(_order(currency="EUR", value="19.00")))
    ng = verify_order("ORDER-1", settings, client=DummyPayPalClient(_order()))

    assert ok.valid is True
    assert ng.reason == RejectionReason.CURRENCY_MISMATCH


def test_reauthenticates_on_every_call():
    client = DummyPayPalClient(_order())

    verify_order("ORDER-1", _settings(), client=client)
    verify_order("ORDER-1", _settings(), client=client)

    assert client.calls.count("token") == 2


@pytest.mark.parametrize("missing", ["client_id", "client_secret"])
def test_missing_credentials_raise_config_error_without_network(missing):
    client = DummyPayPalClient(_order())

    with pytest.raises(PayPalConfigError) as excinfo:
        verify_order("ORDER-1", _settings(**{missing: None}), client=client)

    assert client.calls == []
    assert "PAYPAL_CLIENT" in str(excinfo.value)


def test_empty_order_id_is_rejected_before_network():
    client = DummyPayPalClient(_order())

    with pytest.raises(ValueError):
        verify_order("  ", _settings(), client=client)

    assert client.calls == []


def test_auth_error_aborts_before_order_fetch():
    client = DummyPayPalClient(_order(), token_error=PayPalAuthError("denied"))

    with pytest.raises(PayPalAuthError):
        verify_order("ORDER-1", _settings(), client=client)

    assert client.calls == ["token"]


def test_fetch_error_propagates():
    client = DummyPayPalClient(fetch_error=PayPalFetchError("not found", status_code=404))

    with pytest.raises(PayPalFetchError):
        verify_order("ORDER-1", _settings(), client=client)


def test_malformed_order_payload_is_a_fetch_error():
    order = _order()
    order["purchase_units"] = "not-a-list"

    with pytest.raises(PayPalFetchError):
        verify_order("ORDER-1", _settings(), client=DummyPayPalClient(order))


def test_token_endpoint_failure_makes_no_order_request(monkeypatch):
    """
    実際の PayPalClient を使い、トークン取得が 401 の場合に注文取得の HTTP 呼び出しが発生しないことを確認する。
    """
    get_calls = []

    def fake_post(*args, **kwargs):
        return httpx.Response(status_code=401, content=b'{"error": "invalid_client"}')

    def fake_get(*args, **kwargs):
        get_calls.append(args)
        return httpx.Response(status_code=200, content=b"{}")

    monkeypatch.setattr(httpx, "post", fake_post)
    monkeypatch.setattr(httpx, "get", fake_get)

    with pytest.raises(PayPalAuthError) as excinfo:
        verify_order("ORDER-1", _settings())

    assert get_calls == []
    assert "client-secret" not in str(excinfo.value)
