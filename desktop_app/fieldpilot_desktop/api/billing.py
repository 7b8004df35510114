"""Billing endpoints."""

from __future__ import annotations

from typing import Any, Optional

from ..models import BillingOverview, Invoice, Page, Payment, SetupIntent, Subscription, SubscriptionPlan
from ..schemas import CancelSubscriptionRequest, CreateSubscriptionRequest, UpdateSubscriptionRequest
from .client import ApiClient


class BillingApi:
    """Plans, subscription lifecycle, invoices, payments and payment methods."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    # ------------------------------------------------------------------
    # Plans and subscription
    # ------------------------------------------------------------------
    def list_plans(self) -> list[SubscriptionPlan]:
        body = self.client.get("/billing/plans/", tenant=False)
        return [SubscriptionPlan.from_api(item) for item in self.client.unwrap(body) or []]

    def current_subscription(self) -> Optional[Subscription]:
        body = self.client.get("/billing/subscription/", tenant=False)
        data = self.client.unwrap(body)
        return Subscription.from_api(data) if isinstance(data, dict) and data else None

    def create_subscription(self, request: CreateSubscriptionRequest) -> Subscription:
        body = self.client.post("/billing/subscription/create/", json=request.payload(), tenant=False)
        return Subscription.from_api(self.client.unwrap(body) or {})

    def update_subscription(self, request: UpdateSubscriptionRequest) -> Subscription:
        body = self.client.put("/billing/subscription/update/", json=request.payload(), tenant=False)
        return Subscription.from_api(self.client.unwrap(body) or {})

    def cancel_subscription(self, request: CancelSubscriptionRequest) -> Subscription:
        body = self.client.post("/billing/subscription/cancel/", json=request.payload(), tenant=False)
        return Subscription.from_api(self.client.unwrap(body) or {})

    # ------------------------------------------------------------------
    # Overview, invoices and payments
    # ------------------------------------------------------------------
    def overview(self) -> BillingOverview:
        body = self.client.get("/billing/overview/", tenant=False)
        return BillingOverview.from_api(self.client.unwrap(body) or {})

    def list_invoices(self, page: int = 1, page_size: Optional[int] = None) -> Page[Invoice]:
        body = self.client.get("/billing/invoices/", params={"page": page, "page_size": page_size}, tenant=False)
        return self.client.unwrap_page(body, Invoice.from_api)

    def list_payments(self, page: int = 1, page_size: Optional[int] = None) -> Page[Payment]:
        body = self.client.get("/billing/payments/", params={"page": page, "page_size": page_size}, tenant=False)
        return self.client.unwrap_page(body, Payment.from_api)

    # ------------------------------------------------------------------
    # Payment methods
    # ------------------------------------------------------------------
    def create_setup_intent(self) -> SetupIntent:
        body = self.client.post("/billing/setup-intent/", json={}, tenant=False)
        return SetupIntent.from_api(self.client.unwrap(body) or {})

    def add_payment_method(self, payment_method_id: str, set_as_default: bool = True) -> None:
        payload = {"payment_method_id": payment_method_id, "set_as_default": set_as_default}
        self.client.post("/billing/payment-method/add/", json=payload, tenant=False)

    def list_payment_methods(self) -> list[dict[str, Any]]:
        body = self.client.get("/billing/payment-methods/", tenant=False)
        return list(self.client.unwrap(body) or [])

    def set_default_payment_method(self, payment_method_id: str) -> None:
        payload = {"payment_method_id": payment_method_id}
        self.client.post("/billing/payment-methods/set-default/", json=payload, tenant=False)

    def remove_payment_method(self, payment_method_id: str) -> None:
        self.client.delete(f"/billing/payment-methods/{payment_method_id}/", tenant=False)


__all__ = ["BillingApi"]
