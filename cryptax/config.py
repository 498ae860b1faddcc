"""Runtime settings, read from CRYPTAX_* environment variables or a .env file."""

from functools import cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STABLECOIN_ACCOUNTS = frozenset(
    {"USDC", "USDT", "BUSD", "DAI", "UST", "PAX", "HUSD", "TUSD", "GUSD"}
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CryptaxSettings(BaseSettings):
    cost_basis_method: str = "FIFO"
    # Gains and unrealized basis are not reported for these accounts
    stablecoin_accounts: frozenset[str] = DEFAULT_STABLECOIN_ACCOUNTS
    output_timestamp_format: str = "%Y%m%d%H%M%S"
    log_level: LogLevel = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CRYPTAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


@cache
def get_settings() -> CryptaxSettings:
    return CryptaxSettings()
