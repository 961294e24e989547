from typing import List, Protocol


class AIProvider(Protocol):
    def embed(self, text: str) -> List[float]:
        ...

    def generate_text(self, prompt: str) -> str:
        ...
