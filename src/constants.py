"""Application-wide constants.

This module centralizes the Messenger Platform values and defaults so that
configuration, the webhook core and the Graph API client share a single
source of truth.
"""

# =============================================================================
# Facebook Graph API
# =============================================================================

# Base URL of the Graph API (version is appended separately)
FACEBOOK_GRAPH_API_URL = "https://graph.facebook.com"

# Graph API version used for replies and profile lookups
FACEBOOK_GRAPH_API_VERSION = "v2.6"

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Fields requested when looking up a user profile
PROFILE_FIELDS = ("first_name", "last_name", "profile_pic")

# =============================================================================
# Webhook Contract
# =============================================================================

# Expected value of the top-level "object" field of a webhook payload
PAGE_OBJECT = "page"

# Body written back when the handshake verify token does not match
INCORRECT_VERIFY_TOKEN_MESSAGE = "Incorrect verify token."

# Acknowledgment bodies for POST /webhook
ACK_OK = {"status": "ok"}
ACK_NOT_OK = {"status": "not ok"}

# =============================================================================
# Server
# =============================================================================

DEFAULT_PORT = 3000

APP_TITLE = "Facebook Messenger Webhook Bot"
APP_VERSION = "0.1.0"
