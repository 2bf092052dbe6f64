from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(..., alias="DATABASE_URL")

    # Products with ids in this closed range are bar drinks; everything else is entry/food.
    drink_product_id_min: int = Field(1, alias="DRINK_PRODUCT_ID_MIN")
    drink_product_id_max: int = Field(20, alias="DRINK_PRODUCT_ID_MAX")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper() or "INFO"
        return v

    @model_validator(mode="after")
    def _check_drink_range(self) -> "Settings":
        if self.drink_product_id_min > self.drink_product_id_max:
            raise ValueError("DRINK_PRODUCT_ID_MIN must be <= DRINK_PRODUCT_ID_MAX")
        return self

    @property
    def drink_product_range(self) -> tuple[int, int]:
        return self.drink_product_id_min, self.drink_product_id_max


@lru_cache
def get_settings() -> Settings:
    return Settings()
