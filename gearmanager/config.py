"""Application configuration loaded from environment variables and .env file."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from gearmanager.core.character.mutations import MutationPolicy, RotationPolicy

DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Gear manager settings.

    Environment variables win over the .env file. ROTATION_POLICY and
    STRICT_EQUIP decide how permissive the mutation protocol is.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DEBUG: bool = False  # gearmanager.* loggers at DEBUG
    LOG_LEVEL: str = "INFO"

    # Seed data
    CATALOG_PATH: Path = DATA_DIR / "items.json"
    SAMPLE_CHARACTER_PATH: Optional[Path] = DATA_DIR / "sample_character.json"

    # Mutation rules
    ROTATION_POLICY: RotationPolicy = RotationPolicy.REVALIDATE
    STRICT_EQUIP: bool = True

    @property
    def mutation_policy(self) -> MutationPolicy:
        return MutationPolicy(
            rotation=self.ROTATION_POLICY, strict_equip=self.STRICT_EQUIP
        )


settings = Settings()
