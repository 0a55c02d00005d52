from typing import Dict, List

from openai import AsyncOpenAI

from docintake import config

SYSTEM_PROMPT = (
    "You are a helpful assistant answering questions about a document the user uploaded. "
    "Use only the document content below. If the answer is not in the document, say so.\n\n"
    "Document content:\n{document}"
)

_client = None


def get_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        if not config.OPENAI_API_KEY:
            raise RuntimeError("Missing OPENAI_API_KEY in environment variables.")
        _client = AsyncOpenAI(api_key=config.OPENAI_API_KEY)
    return _client


async def generate_chat_response(document_text: str, question: str, history: List[Dict[str, str]]) -> str:
    """
    Answer ``question`` about a document.

    ``history`` holds prior ``{"role", "content"}`` turns, oldest first. The
    question is appended as the final user turn unless history already ends
    with it.
    """
    context = document_text[:config.MAX_CHAT_CONTEXT_LENGTH]
    messages = [{"role": "system", "content": SYSTEM_PROMPT.format(document=context)}]
    messages.extend({"role": m["role"], "content": m["content"]} for m in history)
    if not history or history[-1] != {"role": "user", "content": question}:
        messages.append({"role": "user", "content": question})

    response = await get_client().chat.completions.create(
        model=config.OPENAI_MODEL,
        messages=messages,
        temperature=0.2,
    )
    answer = response.choices[0].message.content or ""
    return answer.strip()
