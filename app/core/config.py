from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    DATABASE_URL: str
    
    REDIS_URL: str
    
    RATE_LIMIT: int = 100
    RATE_LIMIT_WINDOW: int = 600  # 10 minutes
    
    PRICE_CACHE_TTL: int = 60   # 60 seconds
    
    EARTH_RADIUS_METERS: float = 6371000.0
    
    API_TITLE: str = "Zone Pricing Service"
    API_DESCRIPTION: str = "Location-aware price quotes for home services"
    API_VERSION: str = "1.0.0"
    
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
