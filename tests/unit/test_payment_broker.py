import pytest
import stripe

from tourx.errors import InvalidInput, ProcessorError, StoreUnavailable
from tourx.payments import broker
from tourx.payments import stripe_client
from tourx.store.records import Collection


def test_create_intent_sends_minor_units_and_returns_secret(store, stripe_intents):
    out = broker.create_intent(19.99, "C@X.com ")

    assert out == {"clientSecret": "pi_test_1_secret_abc", "intentId": "pi_test_1", "amount": 1999}
    call = stripe_intents.calls[0]
    assert call["amount"] == 1999
    assert call["currency"] == "usd"
    assert call["payment_method_types"] == ["card"]
    assert call["metadata"]["email"] == "c@x.com"
    assert "idempotency_key" not in call
    # Sans clé: aucun état local
    assert store.all(Collection.PAYMENTS) == []


@pytest.mark.parametrize("amount, minor", [(100.00, 10000), (0.01, 1)])
def test_create_intent_amounts(store, stripe_intents, amount, minor):
    assert broker.create_intent(amount, "c@x.com")["amount"] == minor
    assert stripe_intents.calls[-1]["amount"] == minor


def test_create_intent_stripe_error_is_processor_error_without_retry(store, stripe_intents):
    stripe_intents.error = stripe.APIConnectionError("network down")

    with pytest.raises(ProcessorError) as exc:
        broker.create_intent(10, "c@x.com", idempotency_key="k-1")

    assert exc.value.status_code == 500
    assert len(stripe_intents.calls) == 1
    assert store.all(Collection.PAYMENTS) == []


def test_create_intent_missing_stripe_key_is_processor_error(store, stripe_intents, monkeypatch):
    monkeypatch.setattr("tourx.config.STRIPE_SECRET_KEY", "")

    with pytest.raises(ProcessorError):
        broker.create_intent(10, "c@x.com")
    assert stripe_intents.calls == []
    assert stripe_client.is_configured() is False


def test_create_intent_invalid_amount_never_calls_stripe(store, stripe_intents):
    with pytest.raises(InvalidInput):
        broker.create_intent("12.345", "c@x.com")
    assert stripe_intents.calls == []


def test_idempotency_key_persists_pending_reservation(store, stripe_intents):
    broker.create_intent(80, "c@x.com", idempotency_key="cart-42")

    rows = store.all(Collection.PAYMENTS)
    assert len(rows) == 1
    assert rows[0]["status"] == "Pending"
    assert rows[0]["idempotency_key"] == "cart-42"
    assert rows[0]["intent_id"] == "pi_test_1"
    assert rows[0]["booking_ids"] == []
    assert stripe_intents.calls[0]["idempotency_key"] == broker.stripe_idempotency_key("c@x.com", "cart-42")
    assert stripe_intents.calls[0]["idempotency_key"].endswith(":cart-42")

    # Même clé: la réservation existante est réutilisée
    broker.create_intent(80, "c@x.com", idempotency_key="cart-42")
    assert len(store.all(Collection.PAYMENTS)) == 1


def test_idempotency_key_already_paid_is_rejected_before_stripe(store, stripe_intents):
    store.seed(Collection.PAYMENTS, {
        "email": "c@x.com", "price": "80.00", "status": "Paid", "idempotency_key": "cart-42",
    })

    with pytest.raises(InvalidInput):
        broker.create_intent(80, "c@x.com", idempotency_key="cart-42")
    assert stripe_intents.calls == []


def test_reservation_failure_withholds_secret(store, stripe_intents):
    store.fail_on("insert_one", Collection.PAYMENTS)

    with pytest.raises(StoreUnavailable):
        broker.create_intent(80, "c@x.com", idempotency_key="cart-42")


def test_same_key_from_two_payers_maps_to_distinct_stripe_keys(store, stripe_intents):
    broker.create_intent(80, "c@x.com", idempotency_key="cart-1")
    broker.create_intent(80, "d@x.com", idempotency_key="cart-1")

    first, second = (call["idempotency_key"] for call in stripe_intents.calls)
    assert first != second
    assert len(store.all(Collection.PAYMENTS)) == 2
