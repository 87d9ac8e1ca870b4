from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # === PUBLIC DATA (not secrets) ===
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Swipe Match Engine"

    # === DATABASE SETTINGS (from .env) ===
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017/swipematch",
        description="MongoDB connection string, database name taken from the URL path",
    )
    USERS_COLLECTION: str = Field(default="users", description="Collection holding one document per user")
    STORE_BACKEND: str = Field(default="mongo", description="Profile store backend: mongo, memory")

    # === APPLICATION SETTINGS ===
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # === MATCHING SETTINGS ===
    MATCH_APPROVAL_THRESHOLD: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Approval rate that must be exceeded before a match is created"
    )
    CLAMP_APPROVAL_RATE: bool = Field(default=True, description="Cap accumulated approval rate at 1.0")
    TRANSACTIONAL_MATCH_WRITES: bool = Field(
        default=False, description="Write both sides of a new match in one transaction (replica set only)"
    )
    INDEXED_CANDIDATE_QUERY: bool = Field(
        default=False, description="Load candidates with user_type queries instead of a full collection scan"
    )

    # === WEB APP SETTINGS ===
    CORS_ORIGINS: str = Field(default="", description="Allowed CORS origins (comma-separated). Empty = any origin.")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get allowed CORS origins as a list"""
        if not self.CORS_ORIGINS:
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
