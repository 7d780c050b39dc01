"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings. All values can be overridden via environment variables."""

    # Application
    app_name: str = "SlackRelay"
    debug: bool = False
    app_url: str = "http://localhost:3000"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Slack app credentials
    slack_client_id: str = ""
    slack_client_secret: str = ""
    slack_signing_secret: str = ""

    # Slack Web API
    slack_api_base_url: str = "https://slack.com/api"
    slack_authorize_url: str = "https://slack.com/oauth/v2/authorize"
    slack_oauth_scopes: str = "channels:history,chat:write,channels:read,groups:read"
    slack_request_timeout_seconds: float = 30.0
    history_limit: int = 50
    channel_list_limit: int = 200

    # Events webhook
    slack_signature_tolerance_seconds: int = 300  # replay window

    # Session cookie
    auth_cookie_name: str = "slack-user-token"
    auth_cookie_max_age_seconds: int = 60 * 60 * 24 * 30  # 30 days
    post_auth_redirect_path: str = "/slack-chat"

    model_config = {"env_prefix": "SLACKRELAY_", "env_file": ".env", "extra": "ignore"}

    @property
    def oauth_redirect_uri(self) -> str:
        """Callback URL registered with the Slack app."""
        return f"{self.app_url.rstrip('/')}/api/slack/callback"


settings = Settings()
