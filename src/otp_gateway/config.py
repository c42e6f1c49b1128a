"""OTP Gateway: configuration loaded from environment."""

from dataclasses import dataclass

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Secret store ──────────────────────────────────────
    store_backend: str = "redis"  # "redis" or "memory"
    redis_url: str = "redis://localhost:6379/0"

    # ── OTP policy ────────────────────────────────────────
    otp_length: int = 6
    otp_ttl_seconds: int = 600
    otp_max_attempts: int = 3
    rate_limit_window_seconds: int = 3600
    rate_limit_max_requests: int = 3
    brand_name: str = "BlazeSend"

    # ── SMS provider ──────────────────────────────────────
    sms_provider: str = ""  # hubtel | twilio | mnotify | arkesel
    hubtel_client_id: str = ""
    hubtel_client_secret: str = ""
    hubtel_sender_id: str = ""
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_from_number: str = ""
    mnotify_api_key: str = ""
    mnotify_sender_id: str = ""
    arkesel_api_key: str = ""
    arkesel_sender_id: str = ""

    # ── Email provider ────────────────────────────────────
    email_provider: str = ""  # smtp
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_from_email: str = "noreply@example.com"
    smtp_from_name: str = "BlazeSend"
    smtp_use_tls: bool = False

    # ── App ───────────────────────────────────────────────
    app_name: str = "OTP Gateway"
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def sms_credentials(self) -> dict[str, str]:
        """Credentials for the configured SMS provider, keyed by config field."""
        prefix = f"{self.sms_provider.lower()}_"
        return {
            name[len(prefix):]: value
            for name, value in self.model_dump().items()
            if name.startswith(prefix)
        }

    def smtp_credentials(self) -> dict:
        return {
            "host": self.smtp_host,
            "port": self.smtp_port,
            "username": self.smtp_username,
            "password": self.smtp_password,
            "from_email": self.smtp_from_email,
            "from_name": self.smtp_from_name,
            "use_tls": self.smtp_use_tls,
        }


@dataclass(frozen=True)
class OTPPolicy:
    """Limits applied by the OTP engine."""

    code_length: int = 6
    code_ttl_seconds: int = 600
    max_attempts: int = 3
    rate_window_seconds: int = 3600
    max_per_window: int = 3

    @classmethod
    def from_settings(cls, s: Settings) -> "OTPPolicy":
        return cls(
            code_length=s.otp_length,
            code_ttl_seconds=s.otp_ttl_seconds,
            max_attempts=s.otp_max_attempts,
            rate_window_seconds=s.rate_limit_window_seconds,
            max_per_window=s.rate_limit_max_requests,
        )

    @property
    def code_ttl_minutes(self) -> int:
        return max(1, self.code_ttl_seconds // 60)

    @property
    def rate_window_minutes(self) -> int:
        return max(1, self.rate_window_seconds // 60)


# Singleton settings instance
settings = Settings()
