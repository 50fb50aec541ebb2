from functools import lru_cache
from typing import Annotated, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from fxconvert.models.constants import Currency


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variables use the FXCONVERT_ prefix (e.g. FXCONVERT_DEBUG,
    FXCONVERT_RATES_CACHE_TTL_SECONDS, FXCONVERT_SUPPORTED_CURRENCIES=USD,EUR).
    """

    model_config = SettingsConfigDict(
        env_prefix="FXCONVERT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Basic app metadata
    app_name: str = "Currency Conversion API"
    debug: bool = False
    version: str = "0.1.0"
    log_json: bool = True

    # Exchange rates / caching
    api_base_url: str = "https://api.frankfurter.dev/v1"
    http_timeout_seconds: float = Field(5.0, gt=0)
    rates_cache_ttl_seconds: float = Field(60.0, gt=0)

    # Ordered; first entries show first in /rates/currencies
    supported_currencies: Annotated[Tuple[str, ...], NoDecode] = ("USD", "EUR", "JPY", "THB")

    @field_validator("supported_currencies", mode="before")
    @classmethod
    def split_codes(cls, v):
        if isinstance(v, str):
            return tuple(c.strip().upper() for c in v.split(",") if c.strip())
        return v

    def init_post_load(self) -> None:
        """Validate derived fields that depend on the currency catalog."""
        known = {c.value for c in Currency}
        unknown = [c for c in self.supported_currencies if c not in known]
        if unknown:
            raise ValueError(
                f"Unsupported currency codes {unknown}. Allowed: {sorted(known)}"
            )
        if not self.supported_currencies:
            raise ValueError("supported_currencies must not be empty")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
