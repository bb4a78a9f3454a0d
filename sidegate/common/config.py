"""Central environment-driven settings for the gateway process.

Loaded once at startup by `sidegate.services.api_gateway.main` and passed
explicitly into every component that needs provider credentials or endpoints.
"""

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


KNOWN_OTP_PROVIDERS = ("relay", "direct_mail")


class GatewaySettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "sidegate"
    log_level: str = "INFO"
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"

    provider_timeout_seconds: float = 15.0
    provider_retry_attempts: int = 1
    provider_retry_base_delay_seconds: float = 1.0

    otp_providers: str = "relay"
    default_otp_provider: str = "relay"
    app_name: str = "Campus Food App"

    relay_endpoint: str = "https://api.emailjs.com/api/v1.0/email/send"
    relay_origin: str = "https://your-domain.com"

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_use_ssl: bool = False
    smtp_username: str | None = None
    smtp_password: SecretStr | None = None
    mail_from: str | None = None

    payment_base_url: str = "https://api.razorpay.com/v1"
    payment_key_id: str
    payment_key_secret: SecretStr
    payment_currency: str = "INR"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def enabled_otp_providers(self) -> list[str]:
        return [name.strip() for name in self.otp_providers.split(",") if name.strip()]

    @model_validator(mode="after")
    def _check_provider_credentials(self) -> "GatewaySettings":
        enabled = self.enabled_otp_providers
        unknown = [name for name in enabled if name not in KNOWN_OTP_PROVIDERS]
        if unknown:
            raise ValueError(f"unknown OTP providers: {', '.join(unknown)}")
        if self.default_otp_provider not in enabled:
            raise ValueError(f"default_otp_provider {self.default_otp_provider!r} is not enabled")
        if "direct_mail" in enabled and not (self.smtp_username and self.smtp_password):
            raise ValueError("direct_mail provider requires SMTP_USERNAME and SMTP_PASSWORD")
        if not self.payment_key_id or not self.payment_key_secret.get_secret_value():
            raise ValueError("payment processor requires PAYMENT_KEY_ID and PAYMENT_KEY_SECRET")
        if self.provider_timeout_seconds <= 0:
            raise ValueError("provider_timeout_seconds must be positive")
        if self.provider_retry_attempts < 1:
            raise ValueError("provider_retry_attempts must be at least 1")
        return self


def load_settings() -> GatewaySettings:
    """Build settings from the environment; raises when credentials are missing."""

    return GatewaySettings()
