"""Fan-out publishing of one post to several social-network targets."""

__version__ = "0.1.0"
