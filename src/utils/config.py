from pathlib import Path
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv


dotenv_path = Path(__file__).resolve().parents[2] / '.env'
load_dotenv(dotenv_path)


class Settings(BaseSettings):
    """Global configurations."""

    LOG_LEVEL: str = Field('INFO', env='LOG_LEVEL')

    # Provider
    OPENAI_API_KEY: str = Field("", env='OPENAI_API_KEY')
    PROVIDER_DEFAULT: str = Field("openai", env='PROVIDER_DEFAULT')
    MODEL_DEFAULT: str = Field("gpt-4.1-mini", env='MODEL_DEFAULT')

    # Reasoning stage generation parameters
    INTERPLAY_TEMPERATURE: float = Field(0.3, env='INTERPLAY_TEMPERATURE')
    INTERPLAY_MAX_TOKENS: int = Field(4000, env='INTERPLAY_MAX_TOKENS')

    # Page fetching (Researcher)
    PAGE_FETCH_USER_AGENT: str = Field('Interplay-Analysis-Bot/1.0', env='PAGE_FETCH_USER_AGENT')
    PAGE_FETCH_MAX_CONNECTIONS: int = Field(20, env='PAGE_FETCH_MAX_CONNECTIONS')

    # Skill resolution
    DEFAULT_BUSINESS_TYPE: str = Field('ecommerce', env='DEFAULT_BUSINESS_TYPE')

    ALERTS_ENABLED: bool = Field(True, env='ALERTS_ENABLED')


# Avoid having to re-read the .env file and create the Settings object every time you access it
@lru_cache()
def get_settings():
    return Settings()


# Settings will be the object that contains all the configuration of the application.
settings = get_settings()
