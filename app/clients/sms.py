"""SMS gateway client."""
import logging

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


def is_configured() -> bool:
    """Check if an SMS gateway URL is configured."""
    return bool(settings.sms_gateway_url)


def send_sms(numbers: list[str], text: str, client: httpx.Client | None = None) -> bool:
    """
    Forward a text message to the SMS gateway.

    Delivery is fire-and-forget: gateway failures are logged and reported
    through the return value, never raised. Returns True if the gateway
    accepted the batch.
    """
    if not numbers:
        logger.info("No SMS recipients, nothing to send")
        return True

    if client is None:
        if not is_configured():
            logger.warning("No SMS_GATEWAY_URL configured, dropping SMS broadcast")
            return False
        client = httpx.Client(
            base_url=settings.sms_gateway_url,
            timeout=settings.sms_timeout_seconds,
            headers={"Authorization": f"Bearer {settings.sms_gateway_token}"},
        )

    try:
        with client:
            response = client.post("/messages", json={"numbers": numbers, "text": text})
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"SMS broadcast to {len(numbers)} numbers failed: {e}")
        return False

    logger.info(f"SMS broadcast accepted for {len(numbers)} numbers")
    return True
