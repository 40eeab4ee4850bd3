"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

DEFAULT_ROLE = "USER"
DEFAULT_STATUS = True

USER_NOT_FOUND = "User not found"
EMAIL_TAKEN = "Email already registered"
USERNAME_TAKEN = "Username already registered"
EMPTY_PASSWORD = "Password cannot be empty"
