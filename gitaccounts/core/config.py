from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Transport-level settings shared by every account.

    Per-account data (base URL, credentials) lives in GitConfiguration, not here.
    Components take a Settings instance explicitly and only build a default
    one when the caller passes none.
    """

    PROJECT_NAME: str = "git-accounts"

    # HTTP
    HTTP_TIMEOUT_SECONDS: float = 30.0
    CONNECT_TIMEOUT_SECONDS: float = 10.0
    USER_AGENT: str = "git-accounts/0.1"
    MAX_CONNECTIONS: int = 20
    MAX_KEEPALIVE_CONNECTIONS: int = 10

    model_config = SettingsConfigDict(
        env_prefix="GITACCOUNTS_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
