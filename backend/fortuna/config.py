from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Fortuna Goal Screens"
    # remote goals API; every request goes to {api_base_url}/api/...
    api_base_url: str = "https://fortuna-api.onrender.com"
    # no retries are attempted, this is the only bound on a slow request
    request_timeout_seconds: float = 30
    summary_max_length: int = 250
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FORTUNA_", env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
