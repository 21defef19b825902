"""Google Cloud Translation client and the fallback-on-failure translation relay."""

import logging
from dataclasses import dataclass
from typing import Any

from renaspress.config import get_settings
from renaspress.services.base import APIError, BaseAPIClient

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES = [
    {"code": "en", "name": "English"},
    {"code": "ar", "name": "Arabic"},
]

# Placeholder shipped in sample .env files
_PLACEHOLDER_KEY = "your-google-translate-api-key-here"


class GoogleTranslateClient(BaseAPIClient):
    """Client for the Google Cloud Translation v2 REST API.

    Authenticates with an API key passed as the ``key`` query parameter.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.google_translate_api_key
        base = base_url or settings.google_translate_base_url

        if not self._api_key or self._api_key == _PLACEHOLDER_KEY:
            raise ValueError("Google Translate API key is required")

        super().__init__(base_url=base, timeout=timeout)

    @property
    def default_headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    @property
    def _auth_params(self) -> dict[str, str]:
        return {"key": self._api_key}

    async def translate(
        self,
        texts: list[str],
        target: str,
        source: str | None = None,
        format_: str = "text",
    ) -> list[str]:
        """Translate texts, returning translations in input order."""
        body: dict[str, Any] = {"q": texts, "target": target, "format": format_}
        if source:
            body["source"] = source
        data = await self.post("v2", json=body, params=self._auth_params)
        translations = data.get("data", {}).get("translations", [])
        if len(translations) != len(texts):
            raise APIError("Translation response does not match request size")
        return [item["translatedText"] for item in translations]

    async def detect(self, text: str) -> str:
        """Return the most likely language code for ``text``."""
        data = await self.post("v2/detect", json={"q": [text]}, params=self._auth_params)
        detections = data.get("data", {}).get("detections", [])
        if not detections or not detections[0]:
            raise APIError("Language detection returned no result")
        return detections[0][0]["language"]

    async def languages(self, target: str = "en") -> list[dict[str, str]]:
        """List supported languages with names localized to ``target``."""
        params = {**self._auth_params, "target": target}
        data = await self.get("v2/languages", params=params)
        return [
            {"code": item["language"], "name": item.get("name", item["language"])}
            for item in data.get("data", {}).get("languages", [])
        ]


@dataclass
class TextTranslation:
    translated_text: str
    detected_source_language: str | None = None


class TranslationService:
    """Translation relay that never fails.

    Without a configured client, or when the provider call fails, every
    method returns the original text (or a sensible default) and logs a
    warning. Callers cannot tell a fallback from a real translation.
    """

    def __init__(self, client: GoogleTranslateClient | None = None) -> None:
        self.client = client

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()

    async def translate_text(
        self,
        text: str,
        target_language: str,
        source_language: str | None = None,
        format_: str = "html",
    ) -> TextTranslation:
        if not text or not text.strip():
            return TextTranslation(translated_text=text)
        [result] = await self.translate_batch([text], target_language, source_language, format_)
        return result

    async def translate_batch(
        self,
        texts: list[str],
        target_language: str,
        source_language: str | None = None,
        format_: str = "html",
    ) -> list[TextTranslation]:
        if not texts:
            return []

        if self.client is None:
            logger.warning("Google Translate API key not configured. Returning original text.")
            return [TextTranslation(translated_text=text) for text in texts]

        try:
            translated = await self.client.translate(
                texts, target=target_language, source=source_language, format_=format_
            )
        except (APIError, KeyError) as e:
            logger.error("Translation error: %s", e)
            return [TextTranslation(translated_text=text) for text in texts]

        return [
            TextTranslation(translated_text=text, detected_source_language=source_language)
            for text in translated
        ]

    async def detect_language(self, text: str) -> str:
        if not text or not text.strip() or self.client is None:
            return "en"
        try:
            return await self.client.detect(text)
        except APIError as e:
            logger.error("Language detection error: %s", e)
            return "en"

    async def supported_languages(self) -> list[dict[str, str]]:
        if self.client is None:
            return list(DEFAULT_LANGUAGES)
        try:
            return await self.client.languages()
        except APIError as e:
            logger.error("Get supported languages error: %s", e)
            return list(DEFAULT_LANGUAGES)

    async def translate_post_content(
        self,
        title: str,
        content: str,
        excerpt: str | None,
        target_language: str,
    ) -> dict[str, str | None]:
        """Translate a post's title, excerpt and content in one batch."""
        title_result, excerpt_result, content_result = await self.translate_batch(
            [title, excerpt or "", content], target_language, format_="html"
        )
        return {
            "title": title_result.translated_text,
            "excerpt": excerpt_result.translated_text if excerpt else None,
            "content": content_result.translated_text,
        }


async def get_translation_service() -> TranslationService:
    """Factory function to create the translation relay.

    Can be used as a FastAPI dependency. A missing API key yields a relay
    that returns original text.
    """
    try:
        client = GoogleTranslateClient()
    except ValueError:
        return TranslationService()
    return TranslationService(client)
