from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()

class Settings(BaseModel):
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./chirpy.db")
    JWT_SECRET: str = os.getenv("JWT_SECRET", "")
    JWT_ALG: str = os.getenv("JWT_ALG", "HS256")
    ACCESS_TOKEN_SECONDS: int = int(os.getenv("ACCESS_TOKEN_SECONDS", "3600"))
    REFRESH_TOKEN_DAYS: int = int(os.getenv("REFRESH_TOKEN_DAYS", "60"))
    PLATFORM: str = os.getenv("PLATFORM", "")
    POLKA_KEY: str = os.getenv("POLKA_KEY", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def require_secret(self) -> str:
        """
        Return the signing secret, refusing to run without one.
        """
        if not self.JWT_SECRET:
            raise RuntimeError("JWT_SECRET environment variable is not set")
        return self.JWT_SECRET

settings = Settings()
