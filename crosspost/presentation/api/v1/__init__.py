from . import health, messaging, posts

__all__ = ["health", "messaging", "posts"]
