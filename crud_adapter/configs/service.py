"""
Service configuration settings.

Defaults applied to every CRUD service that does not override them.

Dependencies: pydantic, pydantic_settings
System role: Adapter-level defaults (id field, raw mode, pagination)
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from crud_adapter.configs.base import BaseSettings


class ServiceSettings(BaseSettings):
    """Default options for CRUD services."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SERVICE_",
        case_sensitive=False,
        extra="ignore",
    )

    id_field: str = Field(default="id", description="Primary key attribute name")
    raw: bool = Field(default=True, description="Return plain dicts instead of ORM instances")
    paginate_default: int | None = Field(
        default=None,
        ge=1,
        description="Page size when $limit is absent (unset disables pagination)",
    )
    paginate_max: int | None = Field(default=None, ge=1, description="Upper bound for $limit")
    returning_update: bool | None = Field(
        default=None,
        description="Force the UPDATE ... RETURNING patch path (unset: detect from dialect)",
    )

    @model_validator(mode="after")
    def check_pagination_bounds(self) -> "ServiceSettings":
        """Reject a default page size above the configured maximum."""
        if (
            self.paginate_default is not None
            and self.paginate_max is not None
            and self.paginate_default > self.paginate_max
        ):
            raise ValueError("paginate_default cannot exceed paginate_max")
        return self
