from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    DATABASE_URL: str
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # Identity is asserted by the upstream identity provider
    USER_EMAIL_HEADER: str = "X-User-Email"
    USER_NAME_HEADER: str = "X-User-Name"

    SHARE_TOKEN_BYTES: int = 16

    LAYOUT_NODE_WIDTH: int = 200
    LAYOUT_HORIZONTAL_GAP: int = 50
    LAYOUT_ROW_HEIGHT: int = 200

    class Config:
        env_file = ".env"

@lru_cache()
def get_settings():
    return Settings()
