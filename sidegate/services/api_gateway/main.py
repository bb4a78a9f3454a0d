"""Process entrypoint: `uvicorn sidegate.services.api_gateway.main:app`.

Settings are loaded once here; missing provider credentials abort startup.
"""

from sidegate.common.config import load_settings
from sidegate.common.logging import configure_logging
from sidegate.common.startup import log_startup_config
from sidegate.common.tracing import instrument_app, setup_tracing
from sidegate.services.api_gateway.app import build_dispatcher, build_order_service, create_app

settings = load_settings()
configure_logging(settings.service_name, settings.log_level)
setup_tracing(settings)
log_startup_config(
    settings,
    [
        "otp_providers",
        "default_otp_provider",
        "relay_endpoint",
        "relay_origin",
        "smtp_host",
        "smtp_port",
        "smtp_username",
        "smtp_password",
        "payment_base_url",
        "payment_key_id",
        "payment_key_secret",
        "payment_currency",
        "provider_timeout_seconds",
        "provider_retry_attempts",
    ],
)
app = create_app(settings, build_dispatcher(settings), build_order_service(settings))
instrument_app(app)
