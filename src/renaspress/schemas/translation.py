"""Pydantic schemas for the ad-hoc translation endpoint."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class TranslateRequest(BaseModel):
    """Translate one text, a batch of texts, or detect a language."""

    action: Literal["translate", "translate_batch", "detect"]
    text: str | None = None
    texts: list[str] | None = None
    target_language: str | None = Field(default=None, description="ISO 639-1 code")
    source_language: str | None = None

    @model_validator(mode="after")
    def check_action_inputs(self) -> "TranslateRequest":
        if self.action in ("translate", "translate_batch") and not self.target_language:
            raise ValueError("Target language is required")
        if self.action in ("translate", "detect") and not self.text:
            raise ValueError(f"Text is required for {self.action}")
        if self.action == "translate_batch" and self.texts is None:
            raise ValueError("Texts array is required for batch translation")
        return self


class TextTranslationResult(BaseModel):
    translated_text: str
    detected_source_language: str | None = None


class TranslateResponse(BaseModel):
    success: bool = True
    result: TextTranslationResult | None = None
    results: list[TextTranslationResult] | None = None
    language: str | None = None


class SupportedLanguage(BaseModel):
    code: str
    name: str


class LanguagesResponse(BaseModel):
    success: bool = True
    languages: list[SupportedLanguage]
