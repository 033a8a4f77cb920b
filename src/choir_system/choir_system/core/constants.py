"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_MAX_AGE_SECONDS = 7 * 24 * 60 * 60
TOKEN_SALT = "choir-auth"
MIN_PASSWORD_LENGTH = 6
