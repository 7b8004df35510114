from __future__ import annotations

import pytest
from pydantic import ValidationError

from fieldpilot_desktop.errors import ApiError
from fieldpilot_desktop.state.billing import BILLING_CYCLE_PREFERENCE, BillingState, describe_payment_method
from fieldpilot_desktop.token_store import TokenStore

PLAN = {"id": "p2", "name": "Professional", "slug": "professional", "price_monthly": "99.00",
        "price_yearly": "990.00", "yearly_discount_percentage": "16.67", "max_users": 25,
        "features": {"api_access": True}}

SUBSCRIPTION = {"id": "s1", "plan": PLAN, "status": "active", "billing_cycle": "monthly",
                "current_period_end": "2024-06-01T00:00:00Z", "cancel_at_period_end": False,
                "is_active": True, "days_until_renewal": 12}


@pytest.fixture()
def billing(api, token_store):
    return BillingState(api.billing, token_store)


def test_loaders_do_nothing_without_session(billing, session):
    assert billing.load_subscription() is None
    assert billing.load_overview() is None
    assert billing.load_invoices() == []

    assert session.calls == []


def test_plans_load_without_session(billing, session):
    session.add("GET", "/billing/plans/", {"success": True, "data": [PLAN]})

    plans = billing.load_plans()

    assert plans[0].price_for("yearly") == 990.0
    assert plans[0].max_users == 25


def test_load_subscription(billing, session, signed_in):
    session.add("GET", "/billing/subscription/", {"success": True, "data": SUBSCRIPTION})

    subscription = billing.load_subscription()

    assert subscription.plan.slug == "professional"
    assert subscription.days_until_renewal == 12
    assert session.last.host == "localhost:8000"


def test_no_subscription_yet(billing, session, signed_in):
    session.add("GET", "/billing/subscription/", {"success": True, "data": None})

    assert billing.load_subscription() is None
    assert billing.error is None


def test_loader_records_error(billing, session, signed_in):
    session.add("GET", "/billing/overview/", {"message": "Billing service unavailable"}, status=503)

    assert billing.load_overview() is None

    assert billing.error == "Billing service unavailable"
    assert billing.is_loading is False


def test_overview_sets_subscription_and_usage(billing, session, signed_in):
    session.add("GET", "/billing/overview/", {"data": {
        "subscription": SUBSCRIPTION,
        "current_invoice": {"id": "inv1", "invoice_number": "INV-001", "total": "99.00", "status": "open"},
        "recent_payments": [{"id": "pay1", "amount": "99.00", "status": "succeeded"}],
        "usage_summary": {"users": {"current": 5, "limit": 25, "percentage": 20}},
    }})

    overview = billing.load_overview()

    assert billing.subscription.id == "s1"
    assert overview.current_invoice.total == 99.0
    assert overview.usage["users"].percentage == 20.0
    assert overview.recent_payments[0].status == "succeeded"


def test_create_subscription(billing, session, signed_in):
    session.add("POST", "/billing/subscription/create/", {"data": SUBSCRIPTION}, status=201)

    billing.create_subscription("professional", "monthly", "pm_123")

    assert session.last.json == {"plan_slug": "professional", "billing_cycle": "monthly",
                                 "payment_method_id": "pm_123"}
    assert billing.subscription.status == "active"


def test_mutation_without_session_raises_and_records(billing, session):
    with pytest.raises(ApiError):
        billing.change_plan("enterprise")

    assert billing.error == "Not authenticated"
    assert session.calls == []


def test_mutation_error_is_recorded_and_reraised(billing, session, signed_in):
    session.add("PUT", "/billing/subscription/update/", {"message": "Card declined"}, status=402)

    with pytest.raises(ApiError):
        billing.change_plan("enterprise", "yearly")

    assert billing.error == "Card declined"
    assert billing.is_loading is False


def test_invalid_billing_cycle_is_a_validation_error(billing, session, signed_in):
    with pytest.raises(ValidationError):
        billing.create_subscription("professional", "weekly")

    assert billing.error
    assert session.calls == []


def test_cancel_at_period_end(billing, session, signed_in):
    session.add("POST", "/billing/subscription/cancel/", {"data": dict(SUBSCRIPTION, cancel_at_period_end=True)})

    subscription = billing.cancel_subscription(reason="Too expensive")

    assert session.last.json == {"cancel_immediately": False, "reason": "Too expensive"}
    assert subscription.cancel_at_period_end


def test_reactivate_clears_pending_cancellation(billing, session, signed_in):
    session.add("PUT", "/billing/subscription/update/", {"data": SUBSCRIPTION})

    subscription = billing.reactivate_subscription()

    assert session.last.json == {"cancel_at_period_end": False}
    assert not subscription.cancel_at_period_end


def test_billing_cycle_preference_persists(billing, signed_in, tmp_path):
    billing.set_billing_cycle("yearly")

    reopened = BillingState(billing.billing_api, TokenStore(tmp_path / "session.json"))

    assert reopened.selected_billing_cycle == "yearly"
    assert signed_in.preference(BILLING_CYCLE_PREFERENCE) == "yearly"
    with pytest.raises(ValueError):
        billing.set_billing_cycle("weekly")


def test_invoices_and_payments_pages(billing, session, signed_in):
    session.add("GET", "/billing/invoices/", {"count": 1, "results": [
        {"id": "inv1", "invoice_number": "INV-001", "total": "99.00", "issue_date": "2024-05-01"}]})
    session.add("GET", "/billing/payments/", {"count": 0, "results": []})

    invoices = billing.load_invoices(page=2)
    billing.load_payments()

    assert invoices[0].issue_date.isoformat() == "2024-05-01"
    assert session.calls_to("GET", "/billing/invoices/")[0].params == {"page": 2}
    assert billing.payments == []


def test_setup_payment_method(billing, session, signed_in):
    session.add("POST", "/billing/setup-intent/", {"data": {"client_secret": "seti_secret", "customer_id": "cus_1"}})
    session.add("POST", "/billing/payment-method/add/", {"success": True})
    session.add("GET", "/billing/payment-methods/", {"data": [{"id": "pm_123", "brand": "visa", "is_default": True}]})

    intent = billing.setup_payment_method()
    billing.save_payment_method("pm_123")

    assert intent.client_secret == "seti_secret"
    assert session.calls_to("POST", "/billing/payment-method/add/")[0].json == {"payment_method_id": "pm_123",
                                                                                 "set_as_default": True}
    assert [method["id"] for method in billing.payment_methods] == ["pm_123"]


def test_set_default_payment_method_moves_the_flag(billing, session, signed_in):
    session.add("GET", "/billing/payment-methods/", {"data": [{"id": "pm_1", "is_default": True},
                                                              {"id": "pm_2", "is_default": False}]})
    session.add("POST", "/billing/payment-methods/set-default/", {"success": True})
    billing.list_payment_methods()

    billing.set_default_payment_method("pm_2")

    assert session.last.json == {"payment_method_id": "pm_2"}
    assert [method["is_default"] for method in billing.payment_methods] == [False, True]


def test_remove_payment_method(billing, session, signed_in):
    session.add("GET", "/billing/payment-methods/", {"data": [{"id": "pm_1"}, {"id": "pm_2"}]})
    session.add("DELETE", "/billing/payment-methods/pm_1/", None, status=204)
    billing.list_payment_methods()

    billing.remove_payment_method("pm_1")

    assert [method["id"] for method in billing.payment_methods] == ["pm_2"]


def test_failed_removal_keeps_method_and_records_error(billing, session, signed_in):
    session.add("GET", "/billing/payment-methods/", {"data": [{"id": "pm_1", "is_default": True}]})
    session.add("DELETE", "/billing/payment-methods/pm_1/", {"message": "Cannot remove the default card"},
                status=400)
    billing.list_payment_methods()

    with pytest.raises(ApiError):
        billing.remove_payment_method("pm_1")

    assert billing.error == "Cannot remove the default card"
    assert [method["id"] for method in billing.payment_methods] == ["pm_1"]


def test_reset(billing, session, signed_in):
    session.add("GET", "/billing/subscription/", {"data": SUBSCRIPTION})
    billing.load_subscription()

    billing.reset()

    assert billing.subscription is None
    assert billing.plans == []


@pytest.mark.parametrize(
    "method, label",
    [
        ({"id": "pm_1", "card": {"brand": "visa", "last4": "4242", "exp_month": 4, "exp_year": 2027},
          "is_default": True}, "Visa ending in 4242  expires 04/2027  (default)"),
        ({"id": "pm_2", "brand": "mastercard", "last4": "4444"}, "Mastercard ending in 4444"),
        ({"id": "pm_3"}, "Card ending in ????"),
    ],
)
def test_describe_payment_method(method, label):
    assert describe_payment_method(method) == label
