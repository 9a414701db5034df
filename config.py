from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Parts Catalog Gateway"
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]  # Change in production

    # Timeout for outbound HTTP requests (seconds)
    HTTP_REQUEST_TIMEOUT: float = 30.0

    # TecDoc parts catalog
    TECDOC_API_KEY: Optional[str] = None
    TECDOC_PROVIDER_ID: Optional[int] = None
    TECDOC_BASE_URL: str = "https://webservice.tecalliance.services/pegasus-3-0/info/proxy/services/TecdocToCatDLB.jsonEndpoint"
    TECDOC_LANGUAGE: str = "no"
    TECDOC_COUNTRY: str = "NO"
    TECDOC_CACHE_TTL_SECONDS: float = 3600.0
    TECDOC_CACHE_MAX_ENTRIES: int = 1024
    # Answer every plate lookup locally to save paid quota (the fixture plate is always local)
    TECDOC_MOCK_LICENSE_PLATES: bool = True
    TECDOC_PAGE_SIZE: int = 100
    TECDOC_MAX_PAGES: int = 5
    TECDOC_DETAILS_LIMIT: int = 10
    TECDOC_DETAILS_MAX_IN_FLIGHT: int = 10

    # Statens vegvesen vehicle registry
    STATENS_VEGVESEN_API_KEY: Optional[str] = None
    VEGVESEN_API_URL: str = "https://www.vegvesen.no/ws/no/vegvesen/kjoretoy/felles/datautlevering/enkeltoppslag/kjoretoydata"

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    class Config:
        case_sensitive = True
        env_file = ".env"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
