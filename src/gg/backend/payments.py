"""Payment provider access (Stripe)."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import stripe

from ..errors import GGError

PRO_PRICE_CENTS = 1500
PRO_PRODUCT_NAME = "gg Pro"
PRO_PRODUCT_DESCRIPTION = "Unlimited gg ask, priority API routing"

# Signed webhooks older than this many seconds are rejected as replays
WEBHOOK_TOLERANCE_SECONDS = stripe.Webhook.DEFAULT_TOLERANCE


class PaymentsError(GGError):
    """The payment provider rejected a request."""


class WebhookSignatureError(GGError):
    """A webhook payload failed signature verification."""


@dataclass
class CheckoutSession:
    id: str
    url: str | None = None
    payment_status: str = ""
    email: str | None = None


class PaymentsGateway(ABC):
    """Operations the licensing backend needs from the payment provider."""

    @abstractmethod
    def get_or_create_customer(self, email: str) -> str:
        """Return the customer id for email, creating the customer if needed."""

    @abstractmethod
    def create_checkout_session(self, customer_id: str, email: str) -> CheckoutSession:
        ...

    @abstractmethod
    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        ...

    @abstractmethod
    def create_portal_session(self, customer_id: str) -> str:
        """Return the billing portal URL."""

    @abstractmethod
    def parse_webhook(self, payload: bytes, signature: str) -> dict[str, Any]:
        """Verify the signature and return the decoded event.

        Raises:
            WebhookSignatureError: If verification fails.
        """


class StripeGateway(PaymentsGateway):
    """Stripe implementation using per-call API keys."""

    def __init__(
        self,
        secret_key: str,
        webhook_secret: str,
        site_url: str = "https://ggdotdev.com",
        tolerance: int = WEBHOOK_TOLERANCE_SECONDS,
    ):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.site_url = site_url
        self.tolerance = tolerance

    def get_or_create_customer(self, email: str) -> str:
        try:
            existing = stripe.Customer.list(email=email, limit=1, api_key=self.secret_key)
            if existing.data:
                return existing.data[0].id
            return stripe.Customer.create(email=email, api_key=self.secret_key).id
        except stripe.StripeError as e:
            raise PaymentsError(f"customer lookup failed: {e}") from e

    def create_checkout_session(self, customer_id: str, email: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                customer=customer_id,
                mode="subscription",
                line_items=[
                    {
                        "price_data": {
                            "currency": "usd",
                            "product_data": {
                                "name": PRO_PRODUCT_NAME,
                                "description": PRO_PRODUCT_DESCRIPTION,
                            },
                            "unit_amount": PRO_PRICE_CENTS,
                            "recurring": {"interval": "month"},
                        },
                        "quantity": 1,
                    }
                ],
                success_url=f"{self.site_url}/success?session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{self.site_url}/pricing",
                metadata={"email": email},
            )
        except stripe.StripeError as e:
            raise PaymentsError(f"checkout failed: {e}") from e
        return CheckoutSession(id=session.id, url=session.url)

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.secret_key)
        except stripe.StripeError as e:
            raise PaymentsError(f"invalid session: {e}") from e

        metadata = getattr(session, "metadata", None)
        email = getattr(metadata, "email", None) if metadata else None
        return CheckoutSession(
            id=session.id,
            url=getattr(session, "url", None),
            payment_status=getattr(session, "payment_status", "") or "",
            email=email or getattr(session, "customer_email", None),
        )

    def create_portal_session(self, customer_id: str) -> str:
        try:
            session = stripe.billing_portal.Session.create(
                api_key=self.secret_key,
                customer=customer_id,
                return_url=f"{self.site_url}/account",
            )
        except stripe.StripeError as e:
            raise PaymentsError(f"portal failed: {e}") from e
        return session.url

    def parse_webhook(self, payload: bytes, signature: str) -> dict[str, Any]:
        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise WebhookSignatureError(f"invalid payload: {e}") from e

        try:
            stripe.WebhookSignature.verify_header(body, signature, self.webhook_secret, tolerance=self.tolerance)
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(str(e)) from e

        try:
            event = json.loads(payload)
        except json.JSONDecodeError as e:
            raise WebhookSignatureError(f"invalid payload: {e}") from e
        if not isinstance(event, dict):
            raise WebhookSignatureError("invalid payload")
        return event
