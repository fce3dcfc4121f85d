"""gg Pro license keys, license records and free-tier usage limits."""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from datetime import datetime, timezone
from typing import Any, Callable, Literal

from pydantic import BaseModel

from .kv import KeyValueStore

logger = logging.getLogger(__name__)

LICENSE_PREFIX = "gg_pro_"
LICENSE_RE = re.compile(r"^gg_pro_[a-f0-9]{16}_[a-f0-9]{8}$")

EMAIL_KEY = "email:"
LICENSE_KEY = "license:"
CUSTOMER_KEY = "customer:"
USAGE_KEY = "usage:"

FREE_DAILY_LIMIT = 10
GRACE_CALLS = 2
USAGE_TTL_SECONDS = 86400 * 2

LicenseStatus = Literal["active", "inactive", "revoked", "payment_failed"]


def generate_license_key(email: str, signing_key: str, random_hex: str | None = None) -> str:
    """Return `gg_pro_<16 hex>_<8 hex>`; the suffix is an HMAC of email:random."""
    random_part = random_hex or secrets.token_hex(8)
    digest = hmac.new(signing_key.encode("utf-8"), f"{email}:{random_part}".encode("utf-8"), hashlib.sha256)
    return f"{LICENSE_PREFIX}{random_part}_{digest.hexdigest()[:8]}"


def is_valid_license_format(key: str) -> bool:
    return bool(LICENSE_RE.match(key))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LicenseRecord(BaseModel):
    """Stored under both email:<email> and license:<key>."""

    license_key: str
    email: str
    customer_id: str | None = None
    subscription_id: str | None = None
    status: LicenseStatus = "active"
    created_at: datetime
    updated_at: datetime
    revoked_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class UsageDecision(BaseModel):
    """Result of a usage check."""

    allowed: bool
    tier: Literal["free", "pro"]
    used: int | None = None
    limit: int | None = None
    remaining: int | None = None
    grace: bool | None = None
    message: str | None = None


class LicenseService:
    """License lifecycle on top of a KeyValueStore."""

    def __init__(
        self,
        kv: KeyValueStore,
        signing_key: str,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.kv = kv
        self.signing_key = signing_key
        self.clock = clock

    def _load(self, key: str) -> LicenseRecord | None:
        raw = self.kv.get(key)
        if raw is None:
            return None
        return LicenseRecord.model_validate_json(raw)

    def _save(self, record: LicenseRecord) -> None:
        payload = record.model_dump_json(exclude_none=True)
        self.kv.put(f"{EMAIL_KEY}{record.email}", payload)
        self.kv.put(f"{LICENSE_KEY}{record.license_key}", payload)
        if record.customer_id:
            self.kv.put(f"{CUSTOMER_KEY}{record.customer_id}", record.license_key)

    def get_by_email(self, email: str) -> LicenseRecord | None:
        return self._load(f"{EMAIL_KEY}{email}")

    def get_by_key(self, license_key: str) -> LicenseRecord | None:
        return self._load(f"{LICENSE_KEY}{license_key}")

    def provision(self, email: str, customer_id: str | None, subscription_id: str | None) -> LicenseRecord:
        """Create an active license after a completed checkout."""
        now = self.clock()
        record = LicenseRecord(
            license_key=generate_license_key(email, self.signing_key),
            email=email,
            customer_id=customer_id,
            subscription_id=subscription_id,
            status="active",
            created_at=now,
            updated_at=now,
        )
        self._save(record)
        logger.info("Provisioned license for %s", email)
        return record

    def find_by_customer(self, customer_id: str) -> str | None:
        """License key for a Stripe customer.

        Uses the customer:<id> index, falling back to a scan of license records
        written before the index existed.
        """
        indexed = self.kv.get(f"{CUSTOMER_KEY}{customer_id}")
        if indexed:
            return indexed

        for key in self.kv.list(LICENSE_KEY):
            record = self._load(key)
            if record is not None and record.customer_id == customer_id:
                self.kv.put(f"{CUSTOMER_KEY}{customer_id}", record.license_key)
                return record.license_key
        return None

    def _set_status(self, customer_id: str, status: LicenseStatus, revoked: bool = False) -> LicenseRecord | None:
        license_key = self.find_by_customer(customer_id)
        if not license_key:
            logger.warning("No license for customer %s (status %s ignored)", customer_id, status)
            return None

        record = self.get_by_key(license_key)
        if record is None:
            return None

        now = self.clock()
        record.status = status
        record.updated_at = now
        if revoked:
            record.revoked_at = now
        self._save(record)
        return record

    def subscription_updated(self, customer_id: str, subscription_status: str) -> LicenseRecord | None:
        status: LicenseStatus = "active" if subscription_status == "active" else "inactive"
        return self._set_status(customer_id, status)

    def revoke(self, customer_id: str) -> LicenseRecord | None:
        record = self._set_status(customer_id, "revoked", revoked=True)
        if record is not None:
            logger.info("Revoked license for %s", record.email)
        return record

    def payment_failed(self, customer_id: str) -> LicenseRecord | None:
        record = self._set_status(customer_id, "payment_failed")
        if record is not None:
            logger.info("Payment failed for %s", record.email)
        return record

    def check_usage(self, machine_id: str | None, license_key: str | None, command: str = "unknown") -> UsageDecision:
        """Count one call against the daily free quota (pro licenses are unlimited).

        Raises:
            ValueError: If no active license is given and machine_id is missing.
        """
        if license_key:
            record = self.get_by_key(license_key)
            if record is not None and record.is_active:
                return UsageDecision(allowed=True, tier="pro", remaining=-1)

        if not machine_id:
            raise ValueError("Machine ID required for free tier")

        today = self.clock().date().isoformat()
        usage_key = f"{USAGE_KEY}{machine_id}:{today}"
        raw = self.kv.get(usage_key)
        count = int(raw) if raw else 0
        total_limit = FREE_DAILY_LIMIT + GRACE_CALLS

        if count >= total_limit:
            logger.info("Free tier limit reached for machine %s (%s)", machine_id, command)
            return UsageDecision(
                allowed=False,
                tier="free",
                used=count,
                limit=FREE_DAILY_LIMIT,
                message="Daily limit reached. Upgrade to Pro for unlimited: https://ggdotdev.com/pro",
            )

        self.kv.put(usage_key, str(count + 1), ttl=USAGE_TTL_SECONDS)
        in_grace = count >= FREE_DAILY_LIMIT
        return UsageDecision(
            allowed=True,
            tier="free",
            used=count + 1,
            limit=FREE_DAILY_LIMIT,
            remaining=max(0, FREE_DAILY_LIMIT - count - 1),
            grace=in_grace,
            message=f"Grace period: {GRACE_CALLS - (count - FREE_DAILY_LIMIT) - 1} calls remaining" if in_grace else None,
        )


def public_view(record: LicenseRecord) -> dict[str, Any]:
    """Fields returned by /verify."""
    return {
        "valid": record.is_active,
        "status": record.status,
        "email": record.email,
        "created_at": record.created_at.isoformat(),
    }
