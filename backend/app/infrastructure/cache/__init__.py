from .redis_content_cache import ContentCache

__all__ = ["ContentCache"]
