"""
Domain constants used across services/routers.
"""

# Xendit invoice callback status that marks a checkout as paid.
# Every other status maps to UNPAID.
XENDIT_PAID_STATUS = "SETTLED"

XENDIT_CALLBACK_HEADER = "X-Callback-Token"

PAYMENT_UPDATED_MESSAGE = "Payment status updated"

# Registration / password-change rules
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 20
PASSWORD_PATTERN = r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d]+$"

# One-time codes for password reset and account deletion
ACCOUNT_TOKEN_LENGTH = 6
