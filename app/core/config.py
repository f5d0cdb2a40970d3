from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "FinanceTracker"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000", "http://localhost:8000"])

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_USERS_TABLE: str = Field(default="finance-users", alias="DYNAMO_TABLE_USERS")
    DYNAMO_TRANSACTIONS_TABLE: str = Field(default="finance-transactions", alias="DYNAMO_TABLE_TRANSACTIONS")
    DYNAMO_CONTACTS_TABLE: str = Field(default="finance-contacts", alias="DYNAMO_TABLE_CONTACTS")

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(default="5f0c3e1d9a7b4c2e8f6a1d3b7c9e2f4a6b8d0c1e3f5a7b9c2d4e6f8a0b1c3d5e", alias="JWT_SECRET")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    JWT_RESET_TOKEN_EXPIRE_MINUTES: int = 60

    # Remote advisor (empty URL disables it)
    ADVISOR_SERVICE_URL: str = Field(default="http://localhost:5001/api")
    ADVISOR_TIMEOUT_SECONDS: float = Field(default=5.0)


settings = Settings()
