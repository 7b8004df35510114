"""Subscription, plans, invoices and payments of the current tenant."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from ..api.billing import BillingApi
from ..errors import ApiError, field_errors
from ..models import BillingOverview, Invoice, Payment, SetupIntent, Subscription, SubscriptionPlan
from ..schemas import CancelSubscriptionRequest, CreateSubscriptionRequest, UpdateSubscriptionRequest
from ..token_store import TokenStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

BILLING_CYCLES = ("monthly", "yearly")
BILLING_CYCLE_PREFERENCE = "preferred_billing_cycle"
UNEXPECTED_ERROR = "An unexpected error occurred"


def describe_payment_method(method: Dict[str, Any]) -> str:
    """One-line label such as ``Visa ending in 4242  expires 04/2027  (default)``."""

    card = method.get("card") if isinstance(method.get("card"), dict) else method
    brand = str(card.get("brand") or method.get("type") or "card").title()
    text = f"{brand} ending in {card.get('last4') or '????'}"
    if card.get("exp_month") and card.get("exp_year"):
        text += f"  expires {int(card['exp_month']):02d}/{card['exp_year']}"
    if method.get("is_default"):
        text += "  (default)"
    return text


class BillingState:
    """Cached billing data plus the last error message.

    Loaders swallow API errors into :attr:`error`; mutations record the error
    and re-raise it so the calling form can stay open.
    """

    def __init__(self, billing_api: BillingApi, token_store: TokenStore) -> None:
        self.billing_api = billing_api
        self.token_store = token_store
        self.subscription: Optional[Subscription] = None
        self.plans: List[SubscriptionPlan] = []
        self.invoices: List[Invoice] = []
        self.payments: List[Payment] = []
        self.payment_methods: List[dict[str, Any]] = []
        self.overview: Optional[BillingOverview] = None
        self.is_loading = False
        self.error: Optional[str] = None
        saved_cycle = token_store.preference(BILLING_CYCLE_PREFERENCE)
        self.selected_billing_cycle = saved_cycle if saved_cycle in BILLING_CYCLES else "monthly"

    def clear_error(self) -> None:
        self.error = None

    def _signed_in(self) -> bool:
        return bool(self.token_store.access_token)

    def _handle_error(self, exc: Exception) -> None:
        if isinstance(exc, ValidationError):
            self.error = next(iter(field_errors(exc).values()), UNEXPECTED_ERROR)
        else:
            self.error = str(exc) or UNEXPECTED_ERROR
        logger.error("Billing request failed: %s", self.error)

    def _load(self, call: Callable[[], T]) -> Optional[T]:
        if not self._signed_in():
            return None
        self.is_loading = True
        self.clear_error()
        try:
            return call()
        except ApiError as exc:
            self._handle_error(exc)
            return None
        finally:
            self.is_loading = False

    def _mutate(self, call: Callable[[], T]) -> T:
        self.is_loading = True
        self.clear_error()
        try:
            if not self._signed_in():
                raise ApiError("Not authenticated", status=401)
            return call()
        except (ApiError, ValidationError) as exc:
            self._handle_error(exc)
            raise
        finally:
            self.is_loading = False

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------
    def load_subscription(self) -> Optional[Subscription]:
        self._load(self._fetch_subscription)
        return self.subscription

    def _fetch_subscription(self) -> None:
        self.subscription = self.billing_api.current_subscription()

    def create_subscription(self, plan_slug: str, billing_cycle: str,
                            payment_method_id: Optional[str] = None) -> Subscription:
        def call() -> Subscription:
            request = CreateSubscriptionRequest(plan_slug=plan_slug, billing_cycle=billing_cycle,
                                                payment_method_id=payment_method_id)
            return self.billing_api.create_subscription(request)

        self.subscription = self._mutate(call)
        return self.subscription

    def change_plan(self, plan_slug: str, billing_cycle: Optional[str] = None) -> Subscription:
        """Upgrade or downgrade to another plan."""

        def call() -> Subscription:
            request = UpdateSubscriptionRequest(plan_slug=plan_slug, billing_cycle=billing_cycle)
            return self.billing_api.update_subscription(request)

        self.subscription = self._mutate(call)
        return self.subscription

    def cancel_subscription(self, immediately: bool = False, reason: Optional[str] = None) -> Subscription:
        def call() -> Subscription:
            request = CancelSubscriptionRequest(cancel_immediately=immediately, reason=reason or None)
            return self.billing_api.cancel_subscription(request)

        self.subscription = self._mutate(call)
        return self.subscription

    def reactivate_subscription(self) -> Subscription:
        """Undo a cancellation that is scheduled for the end of the period."""

        request = UpdateSubscriptionRequest(cancel_at_period_end=False)
        self.subscription = self._mutate(lambda: self.billing_api.update_subscription(request))
        return self.subscription

    # ------------------------------------------------------------------
    # Plans
    # ------------------------------------------------------------------
    def load_plans(self) -> List[SubscriptionPlan]:
        """Plans are public, so this works without a session."""

        # Plans are public; no session needed.
        self.is_loading = True
        self.clear_error()
        try:
            self.plans = self.billing_api.list_plans()
        except ApiError as exc:
            self._handle_error(exc)
        finally:
            self.is_loading = False
        return self.plans

    def set_billing_cycle(self, cycle: str) -> None:
        """Remember the monthly or yearly toggle across restarts."""

        if cycle not in BILLING_CYCLES:
            raise ValueError(f"Billing cycle must be one of {', '.join(BILLING_CYCLES)}")
        self.selected_billing_cycle = cycle
        self.token_store.store_preference(BILLING_CYCLE_PREFERENCE, cycle)

    # ------------------------------------------------------------------
    # Payment methods
    # ------------------------------------------------------------------
    def setup_payment_method(self) -> SetupIntent:
        """Create a setup intent; the card itself is entered on the provider's hosted form."""

        return self._mutate(self.billing_api.create_setup_intent)

    def save_payment_method(self, payment_method_id: str, set_as_default: bool = True) -> None:
        self._mutate(lambda: self.billing_api.add_payment_method(payment_method_id, set_as_default))
        self.list_payment_methods()

    def list_payment_methods(self) -> List[dict[str, Any]]:
        methods = self._load(self.billing_api.list_payment_methods)
        if methods is not None:
            self.payment_methods = methods
        return self.payment_methods

    def set_default_payment_method(self, payment_method_id: str) -> None:
        """Make one saved card the default; raises on failure with ``error`` set."""

        self._mutate(lambda: self.billing_api.set_default_payment_method(payment_method_id))
        for method in self.payment_methods:
            method["is_default"] = method.get("id") == payment_method_id

    def remove_payment_method(self, payment_method_id: str) -> None:
        """Delete a saved card; raises on failure and leaves the list unchanged."""

        self._mutate(lambda: self.billing_api.remove_payment_method(payment_method_id))
        self.payment_methods = [method for method in self.payment_methods if method.get("id") != payment_method_id]

    # ------------------------------------------------------------------
    # Overview, invoices and payments
    # ------------------------------------------------------------------
    def load_overview(self) -> Optional[BillingOverview]:
        overview = self._load(self.billing_api.overview)
        if overview is not None:
            self.overview = overview
            self.subscription = overview.subscription
        return self.overview

    def load_invoices(self, page: int = 1) -> List[Invoice]:
        result = self._load(lambda: self.billing_api.list_invoices(page))
        if result is not None:
            self.invoices = list(result.items)
        return self.invoices

    def load_payments(self, page: int = 1) -> List[Payment]:
        result = self._load(lambda: self.billing_api.list_payments(page))
        if result is not None:
            self.payments = list(result.items)
        return self.payments

    def refresh(self) -> None:
        """Reload the subscription and the overview."""

        self.load_subscription()
        self.load_overview()

    def reset(self) -> None:
        self.subscription = None
        self.plans = []
        self.invoices = []
        self.payments = []
        self.payment_methods = []
        self.overview = None
        self.error = None


__all__ = ["BILLING_CYCLES", "BillingState", "describe_payment_method"]
