from typing import List

from google.generativeai import GenerativeModel, configure

from docintake import config

_model = None


def is_gemini_configured() -> bool:
    return bool(config.GEMINI_API_KEY)


def get_model() -> GenerativeModel:
    global _model
    if _model is None:
        if not is_gemini_configured():
            raise RuntimeError("Missing GEMINI_API_KEY in environment variables.")
        configure(api_key=config.GEMINI_API_KEY)
        _model = GenerativeModel(model_name=config.GEMINI_MODEL)
    return _model


async def _generate(prompt: str) -> str:
    response = await get_model().generate_content_async(prompt)
    return response.text.strip() if hasattr(response, "text") else str(response)


async def generate_document_summary(text: str) -> str:
    prompt = f"Summarize the following text:\n\n{text}"
    return await _generate(prompt)


async def extract_keywords(text: str) -> List[str]:
    prompt = (
        "Extract the most important keywords from the following text. "
        f"Return them as a comma-separated list:\n\n{text}"
    )
    answer = await _generate(prompt)
    return [kw.strip() for kw in answer.split(",") if kw.strip()]
