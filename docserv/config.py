"""Configuration for the docserv server and CLI.

Values come from the environment (prefix ``DOCSERV_``) or a ``.env`` file.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .engine.core.ordering import PrecedenceOrder
from .engine.narrowing.constants import MAN_SECTION_ORDER

# Index file name inside the serving directory
DEFAULT_INDEX_NAME = "auxserver.idx"


class Settings(BaseSettings):
    """docserv settings."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSERV_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Rendered manpages are served from here
    serving_dir: Path = Field(default=Path("/srv/docserv"))
    # Index files joined by "#"; empty means <serving_dir>/auxserver.idx
    index_paths: str = ""

    host: str = "localhost"
    port: int = 8089

    debug: bool = False
    log_level: str = "INFO"

    # Space-separated section search order; empty means man(1)'s default
    section_order: str = ""

    # Seconds to wait for the index to load at startup or on reload
    index_load_timeout: float = 30.0
    # Enable POST /-/reload
    allow_reload: bool = False

    @property
    def index_path_list(self) -> list[Path]:
        """Index files to load, in merge order."""
        paths = [Path(p) for p in self.index_paths.split("#") if p.strip()]
        return paths or [self.serving_dir / DEFAULT_INDEX_NAME]

    @property
    def section_order_list(self) -> list[str]:
        return (self.section_order or MAN_SECTION_ORDER).split()

    @property
    def section_precedence(self) -> PrecedenceOrder:
        return PrecedenceOrder(self.section_order_list)


settings = Settings()
