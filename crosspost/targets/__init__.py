from .facebook import FacebookAdapter
from .facebook_story import FacebookStoryAdapter
from .instagram import InstagramAdapter
from .instagram_story import InstagramStoryAdapter
from .linkedin import LinkedInAdapter
from .twitter import TwitterAdapter

__all__ = [
    "FacebookAdapter",
    "FacebookStoryAdapter",
    "InstagramAdapter",
    "InstagramStoryAdapter",
    "LinkedInAdapter",
    "TwitterAdapter",
]
