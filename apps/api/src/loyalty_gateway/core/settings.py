import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: Literal["development", "staging", "production"] = "development"
    port: int = 5000

    # E-commerce platform (Shopify Admin GraphQL)
    shopify_store: str | None = None
    shopify_access_token: str | None = None
    shopify_api_version: str = "2024-10"

    # Loyalty provider (Rivo merchant API)
    rivo_api_key: str | None = None
    rivo_base_url: str = "https://developer-api.rivo.io/merchant_api/v1"

    # Transactional email (Resend)
    resend_api_key: str | None = None
    resend_api_url: str = "https://api.resend.com/emails"
    resend_from: str = "onboarding@resend.dev"
    email_from_name: str | None = None
    brand_name: str = "Wingstop"

    # Loyalty accrual
    points_per_item: int = Field(default=50, ge=0)

    # Browser form origins, comma separated in the environment
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _parse_origin_list(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str) and value.strip().startswith("["):
            value = json.loads(value)
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple, set)):
            return [str(item).strip() for item in value if str(item).strip()]
        return []

    @property
    def shopify_configured(self) -> bool:
        return bool(self.shopify_store and self.shopify_access_token)

    @property
    def rivo_configured(self) -> bool:
        return bool(self.rivo_api_key)

    @property
    def email_configured(self) -> bool:
        return bool(self.resend_api_key)

    def sender(self, default_name: str | None = None) -> str:
        """Return the ``Name <address>`` sender identity for outbound email."""

        name = self.email_from_name or default_name or self.brand_name
        return f"{name} <{self.resend_from}>"


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
