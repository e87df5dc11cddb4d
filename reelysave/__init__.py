"""Instagram post/reel downloader service."""

__version__ = '1.0.0'
