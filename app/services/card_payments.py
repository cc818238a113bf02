"""Card payment processor client: create Stripe PaymentIntents over the REST API.

Only authorization handles are created here. The client confirms the payment with the
processor directly and then reports the resulting transaction id to POST /payments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

import httpx

from app.services.errors import PaymentProcessorError, PaymentProcessorNotConfiguredError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

PAYMENT_INTENTS_PATH = "/v1/payment_intents"


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str


def to_minor_units(amount: float) -> int:
    """Convert a currency amount to integer minor units (centavos), rounding half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _is_stripe_configured(settings: Settings) -> bool:
    if settings.STRIPE_SECRET_KEY is None:
        return False
    secret = settings.STRIPE_SECRET_KEY.get_secret_value()
    return bool(secret and secret.strip())


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
        error = body.get("error") or {}
        detail = error.get("message") or resp.text[:500]
    except ValueError:
        detail = resp.text[:500] if resp.text else "Unknown error"
    return detail or "Unknown error"


async def create_payment_intent(
    amount: float,
    application_id: int,
    settings: Settings,
) -> PaymentIntent:
    """
    Create a card PaymentIntent for amount (major units) bound to application_id as metadata.

    Raises PaymentProcessorNotConfiguredError when STRIPE_SECRET_KEY is unset and
    PaymentProcessorError when Stripe is unreachable or rejects the request.
    """
    if not _is_stripe_configured(settings):
        raise PaymentProcessorNotConfiguredError(
            "Card payments are not configured; set STRIPE_SECRET_KEY."
        )
    url = f"{settings.STRIPE_API_BASE.rstrip('/')}{PAYMENT_INTENTS_PATH}"
    form = {
        "amount": str(to_minor_units(amount)),
        "currency": settings.STRIPE_CURRENCY,
        "payment_method_types[]": "card",
        "metadata[applicationId]": str(application_id),
    }
    secret = settings.STRIPE_SECRET_KEY.get_secret_value()  # type: ignore[union-attr]
    timeout = httpx.Timeout(settings.STRIPE_REQUEST_TIMEOUT_SEC)

    try:
        async with httpx.AsyncClient(timeout=timeout, auth=(secret, "")) as client:
            resp = await client.post(url, data=form)
    except httpx.TimeoutException as e:
        raise PaymentProcessorError("Payment processor request timed out.") from e
    except httpx.HTTPError as e:
        raise PaymentProcessorError("Payment processor is unreachable.") from e

    if resp.status_code == 401:
        raise PaymentProcessorError("Payment processor authentication failed.", 401)
    if resp.status_code >= 400:
        raise PaymentProcessorError(
            f"Payment processor returned {resp.status_code}: {_error_detail(resp)}",
            resp.status_code,
        )
    data = resp.json()
    intent_id = data.get("id")
    client_secret = data.get("client_secret")
    if not intent_id or not client_secret:
        raise PaymentProcessorError("Payment processor response missing client secret.")

    logger.info(
        "Payment intent created",
        extra={
            "application_id": application_id,
            "payment_intent_id": intent_id,
            "amount_minor": form["amount"],
            "currency": settings.STRIPE_CURRENCY,
        },
    )
    return PaymentIntent(id=intent_id, client_secret=client_secret)
