# activities/classifier/detectors.py

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple

DEFAULT_GOAL_KEYWORDS: Tuple[str, ...] = ("goal", "objective")
DEFAULT_IMPACT_KEYWORDS: Tuple[str, ...] = ("impact",)
DEFAULT_DISTRACTION_KEYWORDS: Tuple[str, ...] = (
    "social media",
    "youtube",
    "netflix",
    "instagram",
    "facebook",
    "twitter",
    "tiktok",
)


class TextSignalDetector(ABC):
    """
    Answers a yes/no question about a free-text description.

    The rule scorer only depends on ``matches``; swapping keyword matching for
    an embedding or classifier backend does not touch the scoring flow.
    """

    @abstractmethod
    def matches(self, text: Optional[str]) -> bool:
        ...


class KeywordDetector(TextSignalDetector):
    """Case-insensitive substring match against a fixed keyword list."""

    def __init__(self, keywords: Iterable[str]):
        self.keywords = tuple(k.lower() for k in keywords if k)

    def matches(self, text: Optional[str]) -> bool:
        if not text:
            return False
        content = str(text).lower()
        return any(word in content for word in self.keywords)

    def __repr__(self) -> str:
        return f"KeywordDetector({list(self.keywords)!r})"
