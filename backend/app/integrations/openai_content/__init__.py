
"""
Public surface of the copy-generation integration:
    from app.integrations.openai_content import ContentGenerator, GenerationError
"""

from .content_generator import ContentGenerator, PromptConfig, extract_products

from .errors import GenerationError, GenerationRequestError, GenerationFormatError


__all__ = [
    "ContentGenerator", "PromptConfig", "extract_products",
    "GenerationError", "GenerationRequestError", "GenerationFormatError",
]
