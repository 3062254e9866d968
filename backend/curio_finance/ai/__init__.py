"""LLM provider abstraction, response normalization and prompts."""
