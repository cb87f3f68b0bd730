from .cohere import CohereEmbeddingProvider
from .custom import CustomEmbeddingProvider
from .huggingface import HuggingFaceEmbeddingProvider
from .openai import OpenAIEmbeddingProvider

__all__ = [
    "CohereEmbeddingProvider",
    "CustomEmbeddingProvider",
    "HuggingFaceEmbeddingProvider",
    "OpenAIEmbeddingProvider",
]
