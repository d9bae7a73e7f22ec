from __future__ import annotations  # LLM request gateway owned by the process entry point

import json
import logging
import os
import threading
from typing import Any, Dict, Optional, Protocol, Sequence, Type, TypeVar

import httpx
from langchain_core.messages import BaseMessage
from langchain_core.runnables import RunnableLambda
from pydantic import BaseModel, ValidationError

from config import LlmRoute


logger = logging.getLogger(__name__)  # Module logger setup


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


T = TypeVar("T", bound=BaseModel)


class LlmClient:  # Chat-completions client shared by every interview agent
    def __init__(self, http: Optional[HttpClient] = None) -> None:
        self._owns_http = http is None
        self._http: HttpClient = http if http is not None else httpx.Client()
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def close(self) -> None:  # Release the underlying HTTP client if we created it
        if self._owns_http:
            close_cb = getattr(self._http, "close", None)
            if callable(close_cb):
                close_cb()

    def __enter__(self) -> "LlmClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def call(self, task: str, schema: Type[T], *, cfg: LlmRoute) -> T:  # Single user message request
        return self.chat([{"role": "user", "content": task}], schema, cfg=cfg)

    def chat(self, messages: Sequence[Dict[str, str]], schema: Type[T], *, cfg: LlmRoute) -> T:
        if cfg.sequential:
            with self._lock_for(cfg):
                return self._execute(messages, schema, cfg)
        return self._execute(messages, schema, cfg)

    def runnable(self, route: LlmRoute, schema: Type[T]) -> RunnableLambda:  # Runnable tail for LangChain prompt pipelines
        def _invoke(payload: Any) -> T:
            return self.chat(_coerce_messages(payload), schema, cfg=route)

        return RunnableLambda(_invoke)

    def _lock_for(self, cfg: LlmRoute) -> threading.Lock:
        key = cfg.name or f"{cfg.base_url}{cfg.endpoint}"
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
        return lock

    def _execute(self, messages: Sequence[Dict[str, str]], schema: Type[T], cfg: LlmRoute) -> T:
        base_messages: list[Dict[str, str]] = []
        if cfg.enforce_json:
            schema_json = json.dumps(schema.model_json_schema(), indent=2)
            base_messages.append(
                {"role": "system", "content": "Reply with a single JSON object matching this schema:\n" + schema_json}
            )
        base_messages.extend(_normalize_messages(messages))
        attempts = cfg.max_retries + 1
        last_error: Optional[Exception] = None
        last_error_text: Optional[str] = None
        preview = _preview(base_messages)
        logger.info("LLM request start route=%s model=%s attempts=%d preview=%s", cfg.name, cfg.model, attempts, preview)
        for attempt in range(attempts):
            attempt_messages = list(base_messages)
            if attempt > 0:
                attempt_messages.append({"role": "system", "content": _retry_hint(last_error_text, cfg.enforce_json)})
            response = self._post(cfg, _payload(cfg, attempt_messages))
            if response.status_code >= 400:
                logger.error("LLM error status route=%s status=%s", cfg.name, response.status_code)
                raise LlmGatewayError(f"LLM returned status {response.status_code}")
            try:
                data = response.json()
            except ValueError as exc:
                logger.error("Invalid JSON payload from LLM: %s", exc)
                raise LlmGatewayError("LLM payload was not JSON") from exc
            content = _extract_content(data)
            try:
                parsed = _validate(schema, content)
            except (json.JSONDecodeError, ValidationError) as exc:
                logger.warning("LLM output validation failed route=%s attempt=%d: %s", cfg.name, attempt + 1, exc)
                last_error = exc
                last_error_text = str(exc)
                continue
            logger.info("LLM request done route=%s model=%s attempt=%d", cfg.name, cfg.model, attempt + 1)
            return parsed
        raise LlmGatewayError("LLM output validation failed") from last_error

    def _post(self, cfg: LlmRoute, payload: Dict[str, Any]) -> HttpResponse:
        headers = {"Content-Type": "application/json"}
        if cfg.api_key_env:
            api_key = os.getenv(cfg.api_key_env)
            if api_key:
                headers["Authorization"] = f"Bearer {api_key}"
        headers.update(cfg.extra_headers)
        try:
            return self._http.post(f"{cfg.base_url}{cfg.endpoint}", json=payload, headers=headers, timeout=cfg.timeout_s)
        except httpx.HTTPError as exc:
            logger.error("LLM transport failure route=%s: %s", cfg.name, exc)
            raise LlmGatewayError(f"LLM transport failed: {exc}") from exc


def _payload(cfg: LlmRoute, messages: Sequence[Dict[str, str]]) -> Dict[str, Any]:  # Build chat-completions body
    payload: Dict[str, Any] = {"model": cfg.model, "messages": list(messages)}
    if cfg.temperature is not None:
        payload["temperature"] = cfg.temperature
    if cfg.max_tokens is not None:
        payload["max_tokens"] = cfg.max_tokens
    if cfg.response_format:
        payload["response_format"] = {"type": cfg.response_format}
    return payload


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> list[Dict[str, str]]:  # Ensure message payload shape
    normalized: list[Dict[str, str]] = []
    for item in messages:
        if not isinstance(item, dict):
            raise TypeError("Each chat message must be a dict with role/content")
        role = str(item.get("role", "")).strip()
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": str(item.get("content", ""))})
    return normalized


def _preview(messages: Sequence[Dict[str, str]]) -> str:  # First non-empty user-facing line for logging
    for message in messages:
        if message.get("role") == "system":
            continue
        text = message.get("content", "").strip()
        if text:
            line = text.splitlines()[0]
            return line if len(line) <= 120 else line[:117] + "..."
    return ""


def _extract_content(data: Any) -> str:  # Extract message content from LLM response
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
        if isinstance(data.get("content"), str):
            return data["content"]
    raise LlmGatewayError("LLM response missing content")


def _validate(schema: Type[T], content: str) -> T:  # Parse JSON content with schema
    return schema.model_validate_json(_strip_code_fences(content))


def _strip_code_fences(content: str) -> str:  # Remove markdown fences some models wrap JSON in
    text = content.strip()
    if not text.startswith("```"):
        return text
    lines = text.splitlines()[1:]
    while lines and not lines[0].strip():
        lines = lines[1:]
    while lines and not lines[-1].strip():
        lines = lines[:-1]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _retry_hint(error_text: Optional[str], enforce_json: bool) -> str:  # Compose retry instructions including last error
    base = "The previous reply failed validation."
    if error_text:
        truncated = error_text.splitlines()[0].strip()
        if len(truncated) > 200:
            truncated = truncated[:197] + "..."
        base += f" Reason: {truncated}."
    if enforce_json:
        return base + " Return a single JSON object that matches the schema."
    return base + " Follow the requested format precisely."


def _coerce_messages(payload: Any) -> Sequence[Dict[str, str]]:  # Convert LangChain prompt values into dict messages
    if hasattr(payload, "to_messages"):
        payload = payload.to_messages()
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, BaseMessage):
        return [_message_dict(payload)]
    if isinstance(payload, (list, tuple)):
        if all(isinstance(item, dict) for item in payload):
            return list(payload)  # type: ignore[return-value]
        if all(isinstance(item, BaseMessage) for item in payload):
            return [_message_dict(item) for item in payload]
    raise TypeError("Unsupported message payload for LLM runnable")


def _message_dict(message: BaseMessage) -> Dict[str, str]:  # Map LangChain BaseMessage to role/content dict
    role = {"human": "user", "ai": "assistant"}.get(message.type, message.type)
    content = message.content
    if not isinstance(content, str):
        content = json.dumps(content)
    return {"role": role, "content": content}
