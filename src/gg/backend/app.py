"""FastAPI entry point for the gg licensing backend."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from .kv import CloudflareKVStore, KeyValueStore, MemoryKeyValueStore
from .licenses import LicenseService, is_valid_license_format, public_view
from .payments import PaymentsError, PaymentsGateway, StripeGateway, WebhookSignatureError
from .settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(__name__)

SERVICE_NAME = "gg-backend"


class CheckoutRequest(BaseModel):
    email: str | None = None


class VerifyRequest(BaseModel):
    license_key: str | None = None


class UsageRequest(BaseModel):
    machine_id: str | None = None
    command: str | None = None
    license_key: str | None = None


class PortalRequest(BaseModel):
    email: str | None = None
    license_key: str | None = None


def error(message: str, status_code: int = 400, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def configure_logging(level: str) -> None:
    """Set up root logging once and apply level to the backend loggers."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("gg.backend").setLevel(level)


def build_kv(settings: Settings) -> KeyValueStore:
    if settings.kv_backend == "cloudflare":
        return CloudflareKVStore(
            settings.cloudflare_account_id,
            settings.cloudflare_namespace_id,
            settings.cloudflare_api_token,
        )
    return MemoryKeyValueStore()


def get_service(request: Request) -> LicenseService:
    return request.app.state.licenses


def get_gateway(request: Request) -> PaymentsGateway:
    return request.app.state.payments


def handle_event(service: LicenseService, event: dict[str, Any]) -> None:
    """Apply one Stripe webhook event to the license records."""
    event_type = event.get("type", "")
    obj = (event.get("data") or {}).get("object") or {}

    if event_type == "checkout.session.completed":
        email = (obj.get("metadata") or {}).get("email") or obj.get("customer_email")
        if not email:
            logger.error("No email in checkout session %s", obj.get("id"))
            return
        service.provision(email, obj.get("customer"), obj.get("subscription"))
    elif event_type == "customer.subscription.updated":
        service.subscription_updated(obj.get("customer", ""), obj.get("status", ""))
    elif event_type == "customer.subscription.deleted":
        service.revoke(obj.get("customer", ""))
    elif event_type == "invoice.payment_failed":
        service.payment_failed(obj.get("customer", ""))
    else:
        logger.debug("Ignoring webhook event %s", event_type)


def create_app(
    settings: Settings | None = None,
    kv: KeyValueStore | None = None,
    gateway: PaymentsGateway | None = None,
) -> FastAPI:
    """Build the application. Tests inject kv and gateway."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="gg Backend",
        description="Stripe subscriptions and gg Pro license keys",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.state.licenses = LicenseService(kv or build_kv(settings), settings.license_signing_key)
    app.state.payments = gateway or StripeGateway(
        settings.stripe_secret_key,
        settings.stripe_webhook_secret,
        site_url=settings.site_url,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unrouted method/path pairs all answer 404
        if exc.status_code in (404, 405):
            return error("Not found", 404)
        return error(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error("Invalid request body", 400)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error("Internal server error", 500)

    @app.get("/", summary="Health check")
    @app.get("/health", summary="Health check")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": SERVICE_NAME, "version": __version__}

    @app.post("/checkout", summary="Start a gg Pro subscription checkout")
    def checkout(
        body: CheckoutRequest,
        service: LicenseService = Depends(get_service),
        gateway: PaymentsGateway = Depends(get_gateway),
    ):
        if not body.email:
            return error("Email required")

        existing = service.get_by_email(body.email)
        if existing is not None and existing.is_active:
            return error("Already subscribed", license_key=existing.license_key)

        try:
            customer_id = gateway.get_or_create_customer(body.email)
            session = gateway.create_checkout_session(customer_id, body.email)
        except PaymentsError as e:
            logger.error("Checkout failed for %s: %s", body.email, e)
            return error("Checkout failed", 502)

        return {"checkout_url": session.url, "session_id": session.id}

    @app.post("/webhook", summary="Stripe webhook receiver")
    async def webhook(
        request: Request,
        stripe_signature: str | None = Header(default=None, alias="stripe-signature"),
        service: LicenseService = Depends(get_service),
        gateway: PaymentsGateway = Depends(get_gateway),
    ):
        if not stripe_signature:
            return error("Missing signature")

        payload = await request.body()
        try:
            event = gateway.parse_webhook(payload, stripe_signature)
        except WebhookSignatureError as e:
            logger.warning("Webhook signature verification failed: %s", e)
            return error("Invalid signature")

        handle_event(service, event)
        return {"received": True}

    @app.post("/verify", summary="Check a license key")
    def verify(body: VerifyRequest, service: LicenseService = Depends(get_service)):
        if not body.license_key:
            return error("License key required", valid=False)
        if not is_valid_license_format(body.license_key):
            return {"valid": False, "error": "Invalid license format"}

        record = service.get_by_key(body.license_key)
        if record is None:
            return {"valid": False, "error": "License not found"}
        return public_view(record)

    @app.get("/license", summary="Fetch the license key after purchase")
    def get_license(
        email: str | None = None,
        session_id: str | None = None,
        service: LicenseService = Depends(get_service),
        gateway: PaymentsGateway = Depends(get_gateway),
    ):
        if not email and not session_id:
            return error("Email or session_id required")

        if session_id:
            try:
                session = gateway.retrieve_checkout_session(session_id)
            except PaymentsError:
                return error("Invalid session")
            if session.payment_status != "paid":
                return error("Payment not completed")
            if session.email:
                record = service.get_by_email(session.email)
                if record is not None:
                    return {"license_key": record.license_key, "email": record.email}

        if email:
            record = service.get_by_email(email)
            if record is not None and record.is_active:
                return {"license_key": record.license_key, "email": record.email}

        return error("No active license found", 404)

    @app.post("/usage", summary="Count a free-tier call")
    def usage(body: UsageRequest, service: LicenseService = Depends(get_service)):
        try:
            decision = service.check_usage(body.machine_id, body.license_key, body.command or "unknown")
        except ValueError as e:
            return error(str(e))
        return decision.model_dump(exclude_none=True)

    @app.post("/portal", summary="Open the billing portal")
    def portal(
        body: PortalRequest,
        service: LicenseService = Depends(get_service),
        gateway: PaymentsGateway = Depends(get_gateway),
    ):
        record = None
        if body.license_key:
            record = service.get_by_key(body.license_key)
        elif body.email:
            record = service.get_by_email(body.email)

        if record is None or not record.customer_id:
            return error("No subscription found", 404)

        try:
            url = gateway.create_portal_session(record.customer_id)
        except PaymentsError as e:
            logger.error("Portal session failed for %s: %s", record.email, e)
            return error("Portal unavailable", 502)
        return {"portal_url": url}

    logger.info("gg backend configured (environment=%s, kv=%s)", settings.environment, settings.kv_backend)
    return app


app = create_app()
