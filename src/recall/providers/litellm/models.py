"""Curated model constants for the LiteLLM provider.

Convenience constants for IDE autocomplete. Any valid LiteLLM model string
works as well.

Example:
    from recall.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""


class EmbeddingModels:
    """Embedding models for LiteLLMEmbeddingClient."""

    # OpenAI (1536 dimensions unless reduced via `dimensions`)
    TEXT_ADA_002 = "openai/text-embedding-ada-002"
    TEXT_3_SMALL = "openai/text-embedding-3-small"
    TEXT_3_LARGE = "openai/text-embedding-3-large"

    # Google Gemini
    GEMINI_EMBEDDING_001 = "gemini/gemini-embedding-001"

    # AWS Bedrock
    BEDROCK_TITAN_V2 = "bedrock/amazon.titan-embed-text-v2:0"
    BEDROCK_COHERE_V3 = "bedrock/cohere.embed-english-v3"


class ChatModels:
    """Chat models for LiteLLMClient (knowledge extraction)."""

    GPT_4O = "openai/gpt-4o"
    GPT_4O_MINI = "openai/gpt-4o-mini"
    GPT_5_MINI = "openai/gpt-5-mini"

    CLAUDE_SONNET_45 = "anthropic/claude-sonnet-4-5-20250929"
    CLAUDE_HAIKU_45 = "anthropic/claude-haiku-4-5-20251001"

    GEMINI_3_FLASH = "gemini/gemini-3-flash-preview"
