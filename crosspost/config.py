from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Publisher settings loaded from environment."""

    # Service
    service_name: str = "crosspost"
    debug: bool = False

    # Meta Graph API (Facebook, Instagram)
    meta_graph_version: str = "v23.0"
    fb_page_id: str = ""
    fb_access_token: str = ""  # Page token, also used for Instagram
    ig_user_id: str = ""  # Instagram business account linked to the page

    # LinkedIn API
    linkedin_access_token: str = ""
    linkedin_author_urn: str = ""  # urn:li:person:xxx or urn:li:organization:xxx

    # Twitter (X) API, OAuth 1.0a user context
    twitter_api_key: str = ""
    twitter_api_secret: str = ""
    twitter_access_token: str = ""
    twitter_access_secret: str = ""

    # WhatsApp Cloud API (messaging relay)
    whatsapp_access_token: str = ""
    whatsapp_phone_number_id: str = ""
    whatsapp_max_connect_attempts: int = 5
    whatsapp_retry_delay: float = 5.0  # Seconds, doubled after each failed attempt

    # Target selection
    default_targets: list[str] = ["facebook", "instagram", "linkedin", "twitter"]

    # Timeouts (seconds)
    request_timeout: float = 30.0
    upload_timeout: float = 120.0
    media_fetch_timeout: float = 45.0

    # Chunked video upload guards
    chunk_size: int = 4 * 1024 * 1024
    upload_max_iterations: int = 1000
    upload_max_stalled_polls: int = 3
    upload_max_duration: float = 600.0

    # Instagram container processing
    instagram_poll_interval: float = 5.0
    instagram_max_polls: int = 24

    # Twitter video processing
    twitter_poll_interval: float = 5.0
    twitter_max_polls: int = 24

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
