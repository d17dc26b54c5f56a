import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

# Load environment variables from .env file
load_dotenv()


class TokenConfig(BaseModel):
    """Display metadata for a known denom."""
    model_config = ConfigDict(frozen=True)

    display_name: str
    decimals: int = 6


DEFAULT_TOKEN_CONFIG: Dict[str, TokenConfig] = {
    "factory/osmo1s6ht8qrm8x0eg8xag5x3ckx9mse9g4se248yss/BERNESE": TokenConfig(
        display_name="BERNESE", decimals=6
    ),
    "factory/osmo1z6r6qdknhgsc0zeracktgpcxf43j6sekq07nw8sxduc9lg0qjjlqfu25e3/alloyed/allBTC": TokenConfig(
        display_name="allBTC", decimals=8
    ),
    "gamm/pool/1344": TokenConfig(display_name="GAMM-1344", decimals=6),
    "ibc/23A62409E4AD8133116C249B1FA38EED30E500A115D7B153109462CD82C1CD99": TokenConfig(
        display_name="PAGE", decimals=8
    ),
    "ibc/75345531D87BD90BF108BE7240BD721CB2CB0A1F16D4EBA71B09EC3C43E15C8F": TokenConfig(
        display_name="nBTC", decimals=14
    ),
}


class Settings(BaseSettings):
    """Application settings."""
    # Indexer and DAO
    DAO_ADDRESS: str = os.getenv(
        "DAO_ADDRESS", "osmo1sy9k228qzke0nd3k3vmxdvr68xdlqsu66h3xgm9ke3c4jhamusvsz98pre"
    )
    CHAIN_ID: str = os.getenv("CHAIN_ID", "osmosis-1")
    INDEXER_BASE_URL: str = os.getenv("INDEXER_BASE_URL", "https://indexer.daodao.zone")

    # Polling settings
    POLL_INTERVAL: float = float(os.getenv("POLL_INTERVAL", "30"))  # seconds

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = {
        "env_file": ".env",
        "case_sensitive": True
    }


class DashboardConfig(BaseModel):
    """Immutable configuration handed to the stores and the wallet session."""
    model_config = ConfigDict(frozen=True)

    dao_address: str
    chain_id: str
    indexer_base_url: str = "https://indexer.daodao.zone"
    poll_interval: float = Field(default=30.0, gt=0)
    token_config: Dict[str, TokenConfig] = Field(
        default_factory=lambda: dict(DEFAULT_TOKEN_CONFIG)
    )

    @classmethod
    def from_settings(cls, settings: "Settings", poll_interval: Optional[float] = None) -> "DashboardConfig":
        """Build a config from environment settings, optionally overriding the interval."""
        return cls(
            dao_address=settings.DAO_ADDRESS,
            chain_id=settings.CHAIN_ID,
            indexer_base_url=settings.INDEXER_BASE_URL.rstrip("/"),
            poll_interval=poll_interval if poll_interval is not None else settings.POLL_INTERVAL,
        )


# Create settings instance
settings = Settings()
