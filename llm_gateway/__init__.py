from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import HttpClient, HttpResponse, LlmClient, LlmGatewayError

__all__ = ["HttpClient", "HttpResponse", "LlmClient", "LlmGatewayError"]
