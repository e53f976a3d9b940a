"""Per-target credential bundles, loaded once from settings and read-only afterwards."""

from dataclasses import dataclass

from ..config import Settings


@dataclass(frozen=True)
class MetaPageCredentials:
    """Facebook Page identity."""

    page_id: str
    access_token: str

    @property
    def is_configured(self) -> bool:
        return bool(self.page_id and self.access_token)


@dataclass(frozen=True)
class InstagramCredentials:
    """Instagram business account reached through the linked Page token."""

    ig_user_id: str
    access_token: str

    @property
    def is_configured(self) -> bool:
        return bool(self.ig_user_id and self.access_token)


@dataclass(frozen=True)
class LinkedInCredentials:
    author_urn: str
    access_token: str

    @property
    def is_configured(self) -> bool:
        return bool(self.author_urn and self.access_token)


@dataclass(frozen=True)
class TwitterCredentials:
    """OAuth 1.0a user-context keys."""

    api_key: str
    api_secret: str
    access_token: str
    access_secret: str

    @property
    def is_configured(self) -> bool:
        return all([self.api_key, self.api_secret, self.access_token, self.access_secret])


@dataclass(frozen=True)
class WhatsAppCredentials:
    phone_number_id: str
    access_token: str

    @property
    def is_configured(self) -> bool:
        return bool(self.phone_number_id and self.access_token)


@dataclass(frozen=True)
class CredentialStore:
    """All credential bundles for the process."""

    facebook: MetaPageCredentials
    instagram: InstagramCredentials
    linkedin: LinkedInCredentials
    twitter: TwitterCredentials
    whatsapp: WhatsAppCredentials

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialStore":
        return cls(
            facebook=MetaPageCredentials(
                page_id=settings.fb_page_id,
                access_token=settings.fb_access_token,
            ),
            instagram=InstagramCredentials(
                ig_user_id=settings.ig_user_id,
                access_token=settings.fb_access_token,
            ),
            linkedin=LinkedInCredentials(
                author_urn=settings.linkedin_author_urn,
                access_token=settings.linkedin_access_token,
            ),
            twitter=TwitterCredentials(
                api_key=settings.twitter_api_key,
                api_secret=settings.twitter_api_secret,
                access_token=settings.twitter_access_token,
                access_secret=settings.twitter_access_secret,
            ),
            whatsapp=WhatsAppCredentials(
                phone_number_id=settings.whatsapp_phone_number_id,
                access_token=settings.whatsapp_access_token,
            ),
        )
