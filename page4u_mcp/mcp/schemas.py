"""Shared parameter types for the Page4U tools"""
import base64
import binascii
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from page4u_mcp.services.bundler import AssetEntry, check_asset_path

Slug = Annotated[str, Field(min_length=1)]
PageStatus = Literal["draft", "published", "archived"]
Locale = Literal["he", "en"]
LeadLimit = Annotated[int, Field(ge=1, le=500)]


class AssetInput(BaseModel):
    """One deploy asset as sent by the client: a relative path and base64 content."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str = Field(
        description="File path relative to index.html (e.g. 'images/logo.png', 'css/style.css')"
    )
    content: str = Field(description="Base64-encoded file content")

    @field_validator("filename")
    @classmethod
    def _relative_path(cls, value: str) -> str:
        return check_asset_path(value)

    @field_validator("content")
    @classmethod
    def _base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("content must be base64-encoded")
        return value

    def to_entry(self) -> AssetEntry:
        return AssetEntry(path=self.filename, content=base64.b64decode(self.content))
