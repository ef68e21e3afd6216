"""Global constants for Switchyard.

Centralizes the magic values shared by the dispatcher, the classifier and the
HTTP adapter so they are discoverable in one place.
"""

# =============================================================================
# Statistics
# =============================================================================

NOT_APPLICABLE = "n/a"
"""Status reported for an endpoint when the policy keeps no statistics."""

# =============================================================================
# HTTP status classification
# =============================================================================

HTTP_REQUEST_TIMEOUT = 408
"""Request Timeout: the one 4xx status that is worth retrying elsewhere."""

HTTP_CLIENT_ERROR_MIN = 400
"""Lowest HTTP status treated as a client (fatal) error."""

HTTP_CLIENT_ERROR_MAX = 500
"""Exclusive upper bound of the client error range."""

STATUS_CODE_ATTRIBUTES: tuple[str, ...] = ("http_code", "status_code", "status")
"""Attribute names probed, in order, for an HTTP-like status on an exception."""

# =============================================================================
# Health levels
# =============================================================================

HEALTH_GREEN = "green"
HEALTH_YELLOW = "yellow"
HEALTH_RED = "red"

# =============================================================================
# HTTP transport defaults
# =============================================================================

DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
"""Default per-request timeout for the httpx transport adapter."""
