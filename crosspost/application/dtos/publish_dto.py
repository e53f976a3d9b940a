"""Publish DTOs.

The inbound DTO is deliberately lenient: missing or empty fields are
rejected by the domain request so that validation failures share one
response shape.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ...domain.ports import MediaKind, PublishRequest


class PublishPostDTO(BaseModel):
    """Inbound post, accepting the legacy image/video/socials field names."""

    model_config = ConfigDict(populate_by_name=True)

    media_urls: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("mediaUrls", "imageUrls", "videoUrls", "media_urls"),
    )
    media_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("mediaUrl", "imageUrl", "videoUrl", "media_url"),
    )
    title: str | None = None
    caption: str | None = None
    targets: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("targets", "socials"),
    )

    @field_validator("media_urls", "targets", mode="before")
    @classmethod
    def single_value_as_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    def to_request(self, media_kind: MediaKind) -> PublishRequest:
        """Build the validated domain request."""
        urls = self.media_urls
        if not urls and self.media_url:
            urls = [self.media_url]
        return PublishRequest(
            caption=(self.caption or "").strip(),
            media_urls=tuple(urls or ()),
            media_kind=media_kind,
            title=(self.title or "").strip() or None,
            targets=tuple(self.targets or ()),
        )


class PublishResponseDTO(BaseModel):
    """Response envelope: one entry per resolved target, keyed by lower-case target id."""

    success: bool
    results: dict[str, Any]


class ValidationFailureDTO(BaseModel):
    success: bool = False
    message: str


class SendMessageDTO(BaseModel):
    """Inbound messaging relay request."""

    model_config = ConfigDict(populate_by_name=True)

    destination: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=4096)
    media_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("mediaUrl", "media_url"),
    )
