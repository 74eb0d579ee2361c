"""Security utilities."""

SECRET_PREFIX_LENGTH = 5


def mask_secret(secret: str | None) -> str:
    """Render a credential for diagnostics without exposing it.

    At most a short prefix is shown, and nothing at all for secrets
    too short for the prefix to be non-revealing.
    """
    if not secret:
        return "<missing>"
    if len(secret) <= SECRET_PREFIX_LENGTH * 2:
        return "***"
    return secret[:SECRET_PREFIX_LENGTH] + "..."
