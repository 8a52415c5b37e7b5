from typing import Self

from pydantic import Field, PositiveInt, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GrantSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GHENT_GRANT_",
        env_file=".env",
        extra="ignore",
    )

    access_token_ttl_seconds: PositiveInt = 3600
    refresh_token_ttl_seconds: PositiveInt = 1209600
    authorization_code_ttl_seconds: PositiveInt = 600
    issue_refresh_tokens: bool = True


class ScopeSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GHENT_SCOPE_",
        env_file=".env",
        extra="ignore",
    )

    catalog: dict[str, str | None] = Field(default_factory=dict)
    default: list[str] = Field(default_factory=list)
    required: bool = False

    @field_validator("catalog")
    @classmethod
    def validate_catalog_names(cls, value: dict[str, str | None]) -> dict[str, str | None]:
        for name in value:
            if not name or any(char.isspace() for char in name):
                msg = f"scope names must be non-empty and contain no whitespace: {name!r}"
                raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def validate_default_in_catalog(self) -> Self:
        unknown = [name for name in self.default if name not in self.catalog]
        if unknown:
            msg = f"default scope is not in the catalog: {unknown[0]}"
            raise ValueError(msg)
        return self
