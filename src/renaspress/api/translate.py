"""Ad-hoc translation API endpoints."""

from fastapi import APIRouter, Depends

from renaspress.schemas.translation import (
    LanguagesResponse,
    SupportedLanguage,
    TextTranslationResult,
    TranslateRequest,
    TranslateResponse,
)
from renaspress.services.translation import TextTranslation, TranslationService, get_translation_service

router = APIRouter(prefix="/translate", tags=["translate"])


def to_result(translation: TextTranslation) -> TextTranslationResult:
    return TextTranslationResult(
        translated_text=translation.translated_text,
        detected_source_language=translation.detected_source_language,
    )


@router.post("", response_model=TranslateResponse)
async def translate(
    request: TranslateRequest,
    translator: TranslationService = Depends(get_translation_service),
) -> TranslateResponse:
    """Translate text, translate a batch, or detect a language.

    Provider failures return the original text rather than an error.
    """
    try:
        if request.action == "translate":
            result = await translator.translate_text(
                request.text, request.target_language, request.source_language
            )
            return TranslateResponse(result=to_result(result))

        if request.action == "translate_batch":
            results = await translator.translate_batch(
                request.texts, request.target_language, request.source_language
            )
            return TranslateResponse(results=[to_result(result) for result in results])

        language = await translator.detect_language(request.text)
        return TranslateResponse(language=language)
    finally:
        await translator.close()


@router.get("/languages", response_model=LanguagesResponse)
async def supported_languages(
    translator: TranslationService = Depends(get_translation_service),
) -> LanguagesResponse:
    """List languages the translation provider supports."""
    try:
        languages = await translator.supported_languages()
    finally:
        await translator.close()
    return LanguagesResponse(languages=[SupportedLanguage(**language) for language in languages])
