"""Browser automation building blocks: page context, logging, metrics, LLM clients, prompts and network settle tracking."""

__version__ = "0.1.0"