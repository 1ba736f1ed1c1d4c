# groupmaker/config/settings.py

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    GROUP_SIZE_DEFAULT: int = 4
    DESIRED_WANTED_AMOUNT_DEFAULT: int = 1
    ITERATIONS_DEFAULT: int = 10
    GROUP_COUNT: Optional[int] = None  # None: enough groups for the population
    RANDOM_SEED: Optional[int] = None
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
