"""
Configuration settings for the Flavor Mix service.
Supports both mock (offline) and live (Firestore + OpenAI) modes.
"""

from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application settings
    app_name: str = "Flavor Mix"
    debug: bool = False
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 5000

    # Opt-in mock mode serves the JSON catalog and the offline completion client
    use_mock: bool = False

    # Completion API settings
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    max_tokens: int = 150

    # Document store settings
    firestore_project: Optional[str] = None
    flavor_collection: str = "iaSabor"

    # Local catalog
    data_dir: str = "data"
    catalog_file: str = "flavors.json"

    class Config:
        env_file = ".env"
        env_prefix = "FLAVORMIX_"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Prompt templates for mix generation
PROMPT_TEMPLATES = {
    "mix_system": "You are an expert advisor for hookah flavor mixing.",

    "mix_request": """You are an expert advisor for hookah flavor mixing. Your task is to create a personalized flavor mix for the user based on their preferences.
Here is a list of hookah flavors with their types and ingredients: {catalog}.
Based on this list, create one single flavor mix for a hookah that is {query}.
Use only the exact flavor names and ingredients from the list above, and describe them together as one single mix.""",
}

# Operating modes
MODE_CONFIGS = {
    "mock": {
        "description": "Offline mode using the bundled JSON catalog and a canned completion client"
    },
    "live": {
        "description": "Firestore catalog with OpenAI chat completions"
    }
}
