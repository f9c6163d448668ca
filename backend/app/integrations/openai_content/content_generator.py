from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import openai
from openai import OpenAI

from app.infrastructure.cache import ContentCache
from app.services.catalog.product_records import Platform, parse_platform
from .errors import GenerationFormatError, GenerationRequestError

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Failed to generate descriptions"

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")



@dataclass(frozen=True)
class PromptConfig:
    """Stored prompt template on the OpenAI side, one per platform."""
    id: Optional[str]
    version: str = "1"



"""
Copy generation for one batch of optimized payloads.
    - cache first: a hit returns the stored product list verbatim, no request
    - miss: exactly one responses.create() call with the platform's stored prompt,
      variables={"products": <payload JSON>}
    - the reply must be a JSON object with a "products" list (code fences tolerated)
    - success is written back to the cache under the same batch key

No retry happens here; the SDK client is built with max_retries=0 and the job
runner owns the retry policy.
"""
class ContentGenerator:

    def __init__(
        self,
        client: Any,
        prompts: Mapping[Platform, PromptConfig],
        *,
        cache: Optional[ContentCache] = None,
    ):
        self.client = client
        self.prompts = dict(prompts)
        self.cache = cache


    @classmethod
    def from_settings(cls, *, cache: Optional[ContentCache] = None) -> ContentGenerator:
        from app.core.config import settings

        key = settings.OPENAI_API_KEY.get_secret_value() if settings.OPENAI_API_KEY else None
        client = OpenAI(api_key=key, timeout=settings.OPENAI_TIMEOUT_SEC, max_retries=0)
        prompts = {
            Platform.WOOCOMMERCE: PromptConfig(
                settings.OPENAI_PROMPT_WOOCOMMERCE_ID, settings.OPENAI_PROMPT_WOOCOMMERCE_VERSION
            ),
            Platform.SHOPIFY: PromptConfig(
                settings.OPENAI_PROMPT_SHOPIFY_ID, settings.OPENAI_PROMPT_SHOPIFY_VERSION
            ),
        }
        return cls(client, prompts, cache=cache)


    def generate(self, payloads: Sequence[Dict[str, Any]], platform: Union[str, Platform]) -> List[Dict[str, Any]]:
        plat = parse_platform(platform)
        if not payloads:
            return []

        key = self.cache.key_for(list(payloads)) if self.cache else None
        if key:
            cached = self.cache.get(key)
            if isinstance(cached, list):
                logger.info("content cache hit platform=%s payloads=%d key=%s", plat.value, len(payloads), key)
                return cached
            logger.info("content cache miss platform=%s key=%s", plat.value, key)

        prompt = self._prompt_for(plat)
        started = time.perf_counter()
        logger.info("generating copy platform=%s payloads=%d", plat.value, len(payloads))

        try:
            response = self.client.responses.create(
                prompt={
                    "id": prompt.id,
                    "version": prompt.version,
                    "variables": {"products": json.dumps(list(payloads), indent=2, ensure_ascii=False)},
                }
            )
        except openai.OpenAIError as e:
            raise GenerationRequestError(f"{ERROR_PREFIX}: {_describe(e)}", transient=_is_transient(e)) from e

        products = extract_products(_response_text(response))
        logger.info(
            "generated platform=%s products=%d elapsed_ms=%.0f",
            plat.value, len(products), (time.perf_counter() - started) * 1000,
        )

        if key:
            self.cache.set(key, products)
        return products


    def _prompt_for(self, platform: Platform) -> PromptConfig:
        prompt = self.prompts.get(platform)
        if prompt is None or not prompt.id:
            raise GenerationRequestError(
                f"{ERROR_PREFIX}: Prompt configuration not found for platform: {platform.value}"
            )
        return prompt



'''
  Reply text -> product list.
  Accepts ```json fenced or bare JSON; anything else is a GenerationFormatError.
'''
def extract_products(text: str) -> List[Dict[str, Any]]:
    content = (text or "").strip()
    if content.startswith("```"):
        content = _FENCE_CLOSE_RE.sub("", _FENCE_OPEN_RE.sub("", content)).strip()

    try:
        parsed = json.loads(content or "{}")
    except ValueError as e:
        raise GenerationFormatError(f"{ERROR_PREFIX}: response is not valid JSON ({e})") from e

    products = parsed.get("products") if isinstance(parsed, dict) else None
    if not isinstance(products, list):
        raise GenerationFormatError(f"{ERROR_PREFIX}: Invalid response format from OpenAI")
    return products


def _response_text(response: Any) -> str:
    text = getattr(response, "output_text", None)
    if text:
        return text
    # older SDKs / raw payloads: first text block of the first output item
    try:
        return response.output[0].content[0].text or ""
    except (AttributeError, IndexError, TypeError):
        return ""


def _is_transient(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, openai.RateLimitError)):
        return True
    status = getattr(exc, "status_code", None)
    return isinstance(status, int) and status >= 500


def _describe(exc: Exception) -> str:
    msg = getattr(exc, "message", None) or str(exc)
    return msg or exc.__class__.__name__
