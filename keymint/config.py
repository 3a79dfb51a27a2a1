from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # KeyMint API
    KEYMINT_API_URL: str = "https://api.keymint.dev"
    KEYMINT_ACCESS_TOKEN: str = ""  # Used when no token is passed to the client

    # None keeps the httpx default
    KEYMINT_TIMEOUT: Optional[float] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
