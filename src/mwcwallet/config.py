"""
Configuration management using pydantic-settings.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mwcwallet.constants import STANDARD_DUST_LIMIT
from mwcwallet.network import NetworkParams, NetworkType, get_network_params


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MWC_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    network: NetworkType = NetworkType.MAINNET
    log_level: str = "INFO"

    dust_threshold: int = Field(default=STANDARD_DUST_LIMIT, ge=0)
    change_script_type: Literal["p2pkh", "p2wpkh"] = "p2pkh"
    # sat/vB; when set, change cheaper to spend than to create is folded into the fee
    fee_rate: int | None = Field(default=None, ge=1)

    def network_params(self) -> NetworkParams:
        return get_network_params(self.network)


def get_settings() -> Settings:
    return Settings()
