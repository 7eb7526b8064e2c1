"""Identity directory client for resolving user profiles."""
import logging

import httpx

from app.core.config import settings
from app.schemas import UserProfile

logger = logging.getLogger(__name__)


def is_configured() -> bool:
    """Check if an identity directory URL is configured."""
    return bool(settings.identity_service_url)


def get_users(user_ids: list[str], client: httpx.Client | None = None) -> dict[str, UserProfile]:
    """
    Fetch profiles for a set of user ids.

    Expects the directory to answer ``GET /users?ids=a,b`` with
    ``{"users": [{"id", "firstName", "lastName", "username", "birthDate"}]}``.

    Unknown ids are simply missing from the result. An unconfigured or
    unreachable directory yields an empty dict: callers blank the profile
    fields rather than failing the request.
    """
    if not user_ids:
        return {}

    if client is None:
        if not is_configured():
            logger.warning("No IDENTITY_SERVICE_URL configured, skipping profile lookup")
            return {}
        client = httpx.Client(
            base_url=settings.identity_service_url,
            timeout=settings.identity_timeout_seconds,
        )

    try:
        with client:
            response = client.get("/users", params={"ids": ",".join(user_ids)})
            response.raise_for_status()
            payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Identity lookup failed for {len(user_ids)} users: {e}")
        return {}

    profiles = {}
    for user in payload.get("users", []):
        user_id = user.get("id")
        if not user_id:
            continue
        profiles[str(user_id)] = UserProfile(
            first_name=user.get("firstName") or "",
            last_name=user.get("lastName") or "",
            email=user.get("username") or "",
            birth_date=user.get("birthDate") or "",
        )
    return profiles


def get_user(user_id: str, client: httpx.Client | None = None) -> UserProfile:
    """Fetch one profile, blank when the directory does not know the user."""
    return get_users([user_id], client=client).get(user_id, UserProfile())
