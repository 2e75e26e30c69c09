"""PlantBaby configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage
    storage_url: str = "sqlite:///plantbaby.db"
    storage_key: str = "SavedPlants"

    # Images
    images_dir: str = "images"
    image_jpeg_quality: int = 80

    # Care scheduling — "overwrite" or "latest"
    care_date_policy: str = "overwrite"

    # Identification (plant.id)
    plant_id_endpoint: str = "https://api.plant.id/v2/identify"
    plant_id_api_key: str = ""
    plant_id_timeout_seconds: float = 30.0
    identification_max_suggestions: int = 3

    # General
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    model_config = {
        "env_file": ".env",
        "env_prefix": "PLANTBABY_",
        "extra": "ignore",
    }


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
