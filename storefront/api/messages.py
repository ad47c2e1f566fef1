"""User-facing API error messages."""

NO_SERVICE_AVAILABLE = "No shipping service available for this route"
RATE_UNAVAILABLE = "Could not fetch the {target} exchange rate"
INTERNAL_ERROR = "Internal server error"
