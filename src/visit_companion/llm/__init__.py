from .openai_client import CompletionMetadata, OpenAICompletionClient

__all__ = ["CompletionMetadata", "OpenAICompletionClient"]
