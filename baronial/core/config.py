from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BNHTTP_", extra="ignore")
    host: str = "0.0.0.0"
    port: int = 4754
    # Quote sources; when both are set the upstream instance wins
    avkey: str = ""
    upstream: str = ""
    # Durable cache directory; empty disables the file layer
    cachepath: str = ""
    memcache_limit: int = Field(default=100, gt=0)
    cache_ttlhours: float = Field(default=24, gt=0)
    request_timeout_seconds: float = 30
    max_body_bytes: int = 10 * 1024
    log_level: str = "INFO"

settings = Settings()
