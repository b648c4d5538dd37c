from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    default_strict: bool = False
    log_level: str = "WARNING"
    metrics_enabled: bool = True
    prompt: str = "querysift> "
    max_display_results: int = 50

    model_config = SettingsConfigDict(env_prefix="QUERYSIFT_")


settings = Settings()
