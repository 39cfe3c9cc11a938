"""
Identity Domain Model - Login identity for the account API.
"""

from dataclasses import dataclass
from typing import Optional

from solid_mcp.config import SolidSettings
from solid_mcp.errors import ConfigurationError


@dataclass(frozen=True)
class Identity:
    """
    Email/password pair used to log in to the account API.

    Domain rules:
    - both fields are non-empty
    - repr never shows the password
    """
    email: str
    password: str

    def __post_init__(self):
        if not self.email or not self.password:
            raise ConfigurationError(
                "Missing Solid login identity: SOLID_EMAIL and SOLID_PASSWORD "
                "must both be provided (as arguments or environment variables)."
            )

    def __repr__(self) -> str:
        return f"Identity(email={self.email!r}, password='***')"

    @classmethod
    def resolve(
        cls,
        email: Optional[str] = None,
        password: Optional[str] = None,
        settings: Optional[SolidSettings] = None,
    ) -> "Identity":
        """
        Build an identity from call arguments, falling back to settings per field.

        Raises:
            ConfigurationError: If either field is missing from both sources
        """
        settings = settings or SolidSettings.from_env()
        return cls(
            email=email or settings.email or "",
            password=password or settings.password or "",
        )

    @property
    def username(self) -> str:
        """Local part of the email address."""
        return self.email.split("@")[0]

    def webid_for(self, issuer_url: str) -> str:
        """
        Derive the WebID the Pod server assigns to this account.

        Args:
            issuer_url: Issuer base URL, with trailing slash

        Returns:
            WebID of the form <issuer><username>/profile/card#me
        """
        return f"{issuer_url}{self.username}/profile/card#me"
