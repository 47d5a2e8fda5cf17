"""
Application configuration for api-unininja.

Centralizes environment variables using python-dotenv.

Note:
- API keys and per-university supplements are stored in MongoDB.
- The .env contains only Mongo connection + Unistats credential + HTTP defaults.
"""

import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """
    Configuration settings for the api-unininja service.
    """

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    APP_NAME: str = os.getenv("APP_NAME", "api-unininja")

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Mongo
    MONGODB_URL: str = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
    MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME", "uni")

    # Unistats KIS API (UNISTATS_AUTH is the already base64-encoded "user:password")
    UNISTATS_BASE_URL: str = os.getenv("UNISTATS_BASE_URL", "https://data.unistats.ac.uk/api/v4/KIS")
    UNISTATS_AUTH: str = os.getenv("UNISTATS_AUTH", "")
    UNISTATS_TIMEOUT_S: float = float(os.getenv("UNISTATS_TIMEOUT_S", "20"))

    # HTTP surface
    HOMEPAGE_URL: str = os.getenv("HOMEPAGE_URL", "https://uni.ninja")
    GRAPHIQL_ENABLED: bool = os.getenv("GRAPHIQL_ENABLED", "true").lower() == "true"


settings = Settings()
