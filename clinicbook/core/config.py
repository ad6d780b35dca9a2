from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "ClinicBook"
    API_V1_STR: str = "/api/v1"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_DB: str = "clinicbook"
    DATABASE_URL: Optional[str] = None
    CREATE_TABLES_ON_STARTUP: bool = False
    LOG_LEVEL: str = "INFO"

    # Pattern materialised the first time a doctor's week is read
    DEFAULT_START_TIME: str = "09:00"
    DEFAULT_END_TIME: str = "17:00"
    DEFAULT_WORKING_DAYS: List[int] = [1, 2, 3, 4, 5]

    SLOT_INTERVAL_MINUTES: int = 30

    class Config:
        case_sensitive = True
        env_file = ".env"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}/{self.POSTGRES_DB}"

settings = Settings()
