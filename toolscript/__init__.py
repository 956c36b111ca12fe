"""Tool definitions, reference resolution and chat-completion types for LLM tools."""

__version__ = "0.1.0"