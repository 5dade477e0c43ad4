from .options import AssistantOptions, normalize_openai_base_url

__all__ = ["AssistantOptions", "normalize_openai_base_url"]
