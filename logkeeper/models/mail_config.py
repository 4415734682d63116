"""Mail notification configuration model.

Defines the Pydantic model describing the SMTP endpoint, credentials and
recipients used to ship log files by e-mail.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from logkeeper.core.exceptions import LogConfigError


class MailConfig(BaseModel):
    """SMTP delivery settings for log mail.

    Every field has an empty default so a logger can be built with mail
    disabled; ``validate_complete`` is checked whenever mail is enabled.

    Attributes:
        host: SMTP server hostname.
        port: SMTP server port (465 means implicit SSL).
        username: SMTP login, also the sender address by default.
        password: SMTP password or provider authorization code.
        from_name: Sender display name.
        from_email: Sender address when it differs from ``username``.
        subject: Subject line of every log mail.
        recipients: Destination addresses.
        use_tls: Upgrade plain connections with STARTTLS.
        timeout: Socket timeout in seconds, bounds every SMTP call.
    """

    model_config = ConfigDict(validate_assignment=True)

    host: str = Field(default="", description="SMTP server hostname")
    port: int = Field(default=465, ge=1, le=65535, description="SMTP server port")
    username: str = Field(default="", description="SMTP authentication username")
    password: str = Field(default="", description="SMTP authentication password")
    from_name: str = Field(default="", description="Sender display name")
    from_email: EmailStr | None = Field(default=None, description="Sender address")
    subject: str = Field(default="", description="Mail subject line")
    recipients: list[EmailStr] = Field(default_factory=list, description="Recipients")
    use_tls: bool = Field(default=True, description="Use STARTTLS on plain ports")
    timeout: int = Field(default=30, ge=1, le=120, description="SMTP timeout (seconds)")

    @field_validator("host", "username", "from_name", "subject")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Strip surrounding whitespace from text settings."""
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Remove spaces from the password.

        Gmail app passwords are displayed with spaces for readability
        but must be used without them.
        """
        return v.replace(" ", "")

    @field_validator("recipients", mode="before")
    @classmethod
    def split_recipients(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @property
    def sender_address(self) -> str:
        """Address used in the ``From`` header and SMTP envelope."""
        return str(self.from_email) if self.from_email else self.username

    def missing_fields(self) -> list[str]:
        """List the settings required for delivery that are not set."""
        missing = []
        for name in ("host", "username", "password", "from_name", "subject"):
            if not getattr(self, name):
                missing.append(name)
        if not self.recipients:
            missing.append("recipients")
        return missing

    def validate_complete(self) -> None:
        """Validate that the configuration can deliver mail.

        Raises:
            LogConfigError: If required mail settings are missing.
        """
        missing = self.missing_fields()
        if missing:
            raise LogConfigError(
                f"The mail function is turned on, but the configuration is "
                f"incomplete. Missing: {', '.join(missing)}",
                missing_fields=missing,
            )
