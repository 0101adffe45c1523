"""Verified caller identity produced by the identity resolver."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """
    Fixed-shape view of a verified token.

    - subject: the token's 'sub' claim, stable unique id from the identity provider
    - name / email: optional profile claims, used only when provisioning a new user

    Only ``subject`` is trusted for ownership and role checks.
    """

    subject: str
    name: str | None = None
    email: str | None = None
