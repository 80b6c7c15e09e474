"""
Configuration settings for the Mongo lookup benchmark.

Uses Pydantic Settings to load environment variables for the MongoDB
connection, fixture sizing, the shared query shape, output location and
logging.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    mongo_uri: str = Field("mongodb://localhost:27017", alias="MONGO_URI")
    mongo_db: str = Field("Sales", alias="MONGO_DB")
    mongo_timeout_ms: int = Field(5000, alias="MONGO_TIMEOUT_MS")
    parent_collection: str = Field("customer", alias="PARENT_COLLECTION")
    child_collection: str = Field("order", alias="CHILD_COLLECTION")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")
    output_dir: str = Field(".", alias="OUTPUT_DIR")
    pause_on_exit: bool = Field(True, alias="PAUSE_ON_EXIT")

    # Fixture sizing
    customer_count: int = Field(6000, alias="CUSTOMER_COUNT")
    orders_per_customer: int = Field(7, alias="ORDERS_PER_CUSTOMER")
    padding_copies: int = Field(3, alias="PADDING_COPIES")

    # Query shape
    page_skip: int = Field(0, alias="PAGE_SKIP")
    page_limit: int = Field(20, alias="PAGE_LIMIT")
    collation_locale: str = Field("en", alias="COLLATION_LOCALE")
    lookup_literal_match: bool = Field(False, alias="LOOKUP_LITERAL_MATCH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
