"""LLM adapter module"""

from hostmate.llm.adapter import LLMAdapter, get_llm_adapter

__all__ = ["LLMAdapter", "get_llm_adapter"]
