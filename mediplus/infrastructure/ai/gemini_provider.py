from typing import List

import google.generativeai as genai
from ...config import settings
from ...application.ports.ai_provider import AIProvider


class GeminiProvider(AIProvider):
    def __init__(self) -> None:
        genai.configure(api_key=settings.GEMINI_API_KEY)
        self.model = genai.GenerativeModel(settings.GEMINI_MODEL)
        self.embedding_model = settings.GEMINI_EMBEDDING_MODEL

    def embed(self, text: str) -> List[float]:
        result = genai.embed_content(model=self.embedding_model, content=text)
        return list(result["embedding"])

    def generate_text(self, prompt: str) -> str:
        result = self.model.generate_content(prompt)
        return getattr(result, "text", str(result))
