"""Long-lived session state shared by all windows."""

from .auth import AuthState
from .billing import BillingState
from .onboarding import OnboardingState

__all__ = ["AuthState", "BillingState", "OnboardingState"]
