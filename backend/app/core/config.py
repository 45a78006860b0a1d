from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
import os


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=os.getenv("ENV_FILE", ".env"), extra="ignore")

    app_name: str = Field(default="polo_deeplink")
    app_env: str = Field(default="dev")
    log_level: str = Field(default="INFO")
    version: str = Field(default="0.1.0")
    url_scheme: str = Field(default="com.ham2k.polo://")
    # When off, suggestions carry no derived band/mode
    use_bandplan: bool = Field(default=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
