"""Global pytest configuration."""

import os

# Keep tests offline: no provider, payment, email or Redis credentials
for _var in (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "STRIPE_SECRET_KEY",
    "STRIPE_WEBHOOK_SECRET",
    "RESEND_API_KEY",
    "REDIS_URL",
):
    os.environ.pop(_var, None)
