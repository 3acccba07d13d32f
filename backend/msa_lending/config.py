from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    CENSUS_API_URL: str = "https://api.census.gov/data"
    ACS_YEAR: int = 2019
    INCOME_VARIABLE: str = "DP03_0063E"  # mean household income
    HMDA_API_URL: str = "https://ffiec.cfpb.gov/v2/data-browser-api/view/csv"
    HMDA_YEAR: int = 2019
    INCOME_THRESHOLD: float = 50000
    HTTP_TIMEOUT: Optional[float] = None

    INPUT_CACHE_DIR: str = "./inputCache"
    OUTPUT_CACHE_DIR: str = "./outputCache"
    PUBLIC_DIR: str = "./public"

    RUN_PIPELINE_ON_STARTUP: bool = True
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    HOST: str = "0.0.0.0"
    PORT: int = 6789
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
