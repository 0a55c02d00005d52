"""
Tests for the PDF and AI provider adapters
"""
from types import SimpleNamespace

import pytest

from docintake import config
from docintake.services import gemini, openai_chat, pdf


def _element(text, page_number):
    return SimpleNamespace(text=text, metadata=SimpleNamespace(page_number=page_number))


class TestParsePdf:
    """unstructured-backed extraction"""

    def test_joins_text_and_counts_pages(self, tmp_path, monkeypatch):
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"%PDF-1.4")
        elements = [_element("Title", 1), _element("", 1), _element("Body text", 3), _element("Footer", 2)]
        monkeypatch.setattr(pdf, "partition", lambda filename, strategy: elements)

        parsed = pdf.parse_pdf(str(path))

        assert parsed.text == "Title\nBody text\nFooter"
        assert parsed.page_count == 3

    def test_page_count_defaults_to_one(self, tmp_path, monkeypatch):
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"%PDF-1.4")
        monkeypatch.setattr(pdf, "partition", lambda filename, strategy: [_element("Text", None)])

        assert pdf.parse_pdf(str(path)).page_count == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            pdf.parse_pdf(str(tmp_path / "missing.pdf"))


class FakeGeminiModel:
    def __init__(self, answer):
        self.answer = answer
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        return SimpleNamespace(text=self.answer)


class TestGemini:
    """Summary and keyword prompts"""

    def test_not_configured_without_key(self, monkeypatch):
        monkeypatch.setattr(config, "GEMINI_API_KEY", None)
        assert gemini.is_gemini_configured() is False

    def test_model_requires_key(self, monkeypatch):
        monkeypatch.setattr(config, "GEMINI_API_KEY", None)
        monkeypatch.setattr(gemini, "_model", None)
        with pytest.raises(RuntimeError):
            gemini.get_model()

    @pytest.mark.asyncio
    async def test_keywords_are_split_and_cleaned(self, monkeypatch):
        model = FakeGeminiModel(" revenue, growth ,, logistics \n")
        monkeypatch.setattr(gemini, "_model", model)

        assert await gemini.extract_keywords("some text") == ["revenue", "growth", "logistics"]
        assert "some text" in model.prompts[0]

    @pytest.mark.asyncio
    async def test_summary(self, monkeypatch):
        monkeypatch.setattr(gemini, "_model", FakeGeminiModel("  A short summary.  "))
        assert await gemini.generate_document_summary("text") == "A short summary."


class FakeCompletions:
    def __init__(self, answer):
        self.answer = answer
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.answer)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestOpenAIChat:
    """Chat completion request building"""

    def _client(self, monkeypatch, answer="Answer."):
        completions = FakeCompletions(answer)
        monkeypatch.setattr(openai_chat, "_client", SimpleNamespace(chat=SimpleNamespace(completions=completions)))
        return completions

    @pytest.mark.asyncio
    async def test_history_ending_with_question_is_not_duplicated(self, monkeypatch):
        completions = self._client(monkeypatch, " Two years. ")
        history = [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
            {"role": "user", "content": "How long?"},
        ]

        answer = await openai_chat.generate_chat_response("Warranty: two years.", "How long?", history)

        assert answer == "Two years."
        messages = completions.kwargs["messages"]
        assert messages[0]["role"] == "system"
        assert "Warranty: two years." in messages[0]["content"]
        assert messages[1:] == history
        assert completions.kwargs["model"] == config.OPENAI_MODEL

    @pytest.mark.asyncio
    async def test_question_appended_without_history(self, monkeypatch):
        completions = self._client(monkeypatch)
        await openai_chat.generate_chat_response("doc", "What?", [])
        assert completions.kwargs["messages"][-1] == {"role": "user", "content": "What?"}

    @pytest.mark.asyncio
    async def test_document_context_is_truncated(self, monkeypatch):
        completions = self._client(monkeypatch)
        monkeypatch.setattr(config, "MAX_CHAT_CONTEXT_LENGTH", 5)
        await openai_chat.generate_chat_response("abcdefghij", "Q", [])
        system = completions.kwargs["messages"][0]["content"]
        assert system.endswith("abcde")

    def test_client_requires_key(self, monkeypatch):
        monkeypatch.setattr(config, "OPENAI_API_KEY", None)
        monkeypatch.setattr(openai_chat, "_client", None)
        with pytest.raises(RuntimeError):
            openai_chat.get_client()
