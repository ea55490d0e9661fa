from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GenerationParams:
    temperature: float = 0.7
    max_output_tokens: int = 2000
    top_p: float = 0.9


class TextGenerator(ABC):
    """External text-generation capability."""

    model_name: str

    @abstractmethod
    def generate(self, prompt: str, params: GenerationParams) -> str:
        """Return generated text or raise."""
        pass
