"""Graph API client configuration models."""

from pydantic import BaseModel, Field

from src.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_URL,
    FACEBOOK_GRAPH_API_VERSION,
)


class GraphAPIConfig(BaseModel):
    """Where and how to reach the Facebook Graph API.

    Passed explicitly into the Messenger core and the response handles so
    tests can point them at a fake endpoint.
    """

    base_url: str = Field(
        default=FACEBOOK_GRAPH_API_URL, description="Graph API base URL"
    )
    api_version: str = Field(
        default=FACEBOOK_GRAPH_API_VERSION, description="Graph API version"
    )
    timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for each outbound call (seconds)",
    )

    @property
    def api_root(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.api_version}"

    @property
    def messages_url(self) -> str:
        """Send API endpoint for replies."""
        return f"{self.api_root}/me/messages"

    def profile_url(self, user_id: int | str) -> str:
        """User profile endpoint for ``user_id``."""
        return f"{self.api_root}/{user_id}"
