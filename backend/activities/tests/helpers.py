# activities/tests/helpers.py

import json
from typing import List, Optional


class FakeTextClient:
    """Stands in for OpenAITextClient: fixed reply or fixed failure."""

    def __init__(self, response: Optional[str] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.prompts: List[str] = []
        self.is_configured = True

    @classmethod
    def scoring(cls, score, reasoning: str = "Fake model reasoning") -> "FakeTextClient":
        return cls(response=json.dumps({"score": score, "reasoning": reasoning}))

    @classmethod
    def failing(cls) -> "FakeTextClient":
        return cls(error=RuntimeError("model unavailable"))

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response
