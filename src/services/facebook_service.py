"""Send messages to and read profiles from the Facebook Graph API."""

import time

import httpx
import logfire

from src.constants import PROFILE_FIELDS
from src.models.config_models import GraphAPIConfig
from src.models.messenger import MessengerProfile


async def get_user_profile(
    config: GraphAPIConfig,
    page_access_token: str,
    user_id: int | str,
    client: httpx.AsyncClient | None = None,
) -> MessengerProfile:
    """
    Get the public profile of a Messenger user.

    Fetches first_name, last_name and profile_pic. Errors are raised to the
    caller; there is no retry.

    Raises:
        httpx.HTTPStatusError: Graph API answered with a non-2xx status
        httpx.RequestError: the request could not be completed
    """
    logfire.info(
        "Fetching user profile from Facebook",
        user_id=user_id,
        fields=list(PROFILE_FIELDS),
    )
    params = {
        "fields": ",".join(PROFILE_FIELDS),
        "access_token": page_access_token,
    }
    try:
        if client is not None:
            response = await client.get(config.profile_url(user_id), params=params)
        else:
            async with httpx.AsyncClient(timeout=config.timeout_seconds) as owned:
                response = await owned.get(config.profile_url(user_id), params=params)

        if response.status_code != 200:
            logfire.error(
                "Failed to fetch user profile",
                user_id=user_id,
                status_code=response.status_code,
                response_body=response.text[:500],
            )
        response.raise_for_status()
    except httpx.HTTPError as e:
        logfire.error(
            "Error fetching user profile",
            user_id=user_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    profile = MessengerProfile.model_validate(response.json())
    logfire.info(
        "User profile fetched successfully",
        user_id=user_id,
        has_name=bool(profile.first_name),
    )
    return profile


async def send_message(
    config: GraphAPIConfig,
    page_access_token: str,
    recipient_id: int | str,
    text: str,
    client: httpx.AsyncClient | None = None,
) -> None:
    """
    Send a text message via the Send API.

    Args:
        config: Graph API endpoint and timeout
        page_access_token: Page access token used as ``access_token``
        recipient_id: Messenger user ID to send the message to
        text: Message text to send
        client: Optional shared client; a short-lived one is used otherwise
    """
    start_time = time.time()

    logfire.info(
        "Sending Facebook message",
        recipient_id=recipient_id,
        message_length=len(text),
        api_version=config.api_version,
    )

    params = {"access_token": page_access_token}
    payload = {"recipient": {"id": recipient_id}, "message": {"text": text}}

    try:
        if client is not None:
            response = await client.post(config.messages_url, params=params, json=payload)
        else:
            async with httpx.AsyncClient(timeout=config.timeout_seconds) as owned:
                response = await owned.post(
                    config.messages_url, params=params, json=payload
                )
        elapsed = time.time() - start_time

        if response.is_success:
            logfire.info(
                "Facebook message sent successfully",
                recipient_id=recipient_id,
                status_code=response.status_code,
                response_time_ms=elapsed * 1000,
            )
        else:
            logfire.error(
                "Facebook message send failed",
                recipient_id=recipient_id,
                status_code=response.status_code,
                response_body=response.text[:500],  # Limit response body length
                response_time_ms=elapsed * 1000,
            )

        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API HTTP error",
            recipient_id=recipient_id,
            status_code=e.response.status_code,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API request error",
            recipient_id=recipient_id,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise
