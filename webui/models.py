"""Pydantic models for the configuration blob injected into index.html."""

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from webui.errors import StartupError


class VersionInfo(BaseModel):
    """Build information reported to the UI."""
    model_config = ConfigDict(populate_by_name=True)

    version: str
    commit: str
    build_date: str = Field(alias="buildDate")


class UIConfig(BaseModel):
    """The object substituted for %CONFIG% in index.html."""
    model_config = ConfigDict(populate_by_name=True)

    # "register" collides with ABCMeta.register on the model class
    allow_registration: bool = Field(alias="register")
    version: VersionInfo | dict[str, Any]

    @field_validator("version", mode="wrap")
    @classmethod
    def keep_caller_mapping(cls, value: Any, handler):
        """Pass plain mappings through untouched; only VersionInfo instances are re-shaped."""
        if isinstance(value, Mapping):
            return dict(value)
        return handler(value)

    def to_json_bytes(self) -> bytes:
        """Serialize to compact JSON, treating any failure as fatal for startup."""
        try:
            return self.model_dump_json(by_alias=True).encode("utf-8")
        except (ValueError, TypeError) as exc:
            # PydanticSerializationError is a ValueError
            raise StartupError(f"could not serialize UI config: {exc}") from exc
