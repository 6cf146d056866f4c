"""Environment-based configuration for the ticket archive client."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Ticket archive client configuration.

    All settings can be overridden via environment variables with
    RECORD_ prefix. For example:
        RECORD_API_URL=https://api.example.com
        RECORD_USER_ID=u1
    """

    # Backend connection
    api_url: str = "http://localhost:8080"
    image_base_url: str = "http://localhost:8080"
    timeout_seconds: float = 10.0

    # Identity of the signed-in user
    user_id: str = ""

    # Archive behaviour
    recent_window_days: int = 7
    serialize_like_toggles: bool = False

    log_level: str = "WARNING"

    model_config = {"env_prefix": "RECORD_"}
