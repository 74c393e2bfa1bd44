"""AI capabilities backed by Ollama: semantic search, provider lookup, content and chat."""

import json
from collections.abc import AsyncIterator

import ollama

from common.config import (
    LLM_MODEL,
    LLM_NUM_CTX,
    LLM_TEMPERATURE,
    OLLAMA_HOST,
    OLLAMA_TIMEOUT_SECONDS,
    SEARCH_RESULTS_COUNT,
)
from common.logging_config import get_logger
from common.metrics import (
    llm_completion_tokens,
    llm_prompt_tokens,
    llm_total_duration,
    llm_tps,
    llm_ttft,
)
from common.types import ChatMessage, GeoCoordinate, ProviderSearchResult, SearchResultItem

logger = get_logger("common_llm_utils")

logger.info(f"LLM configured: model={LLM_MODEL}, temp={LLM_TEMPERATURE}, num_ctx={LLM_NUM_CTX}")


class AIServiceError(RuntimeError):
    """Raised when the AI provider fails (quota, timeouts, service unavailable)."""
    pass


class AIContractError(RuntimeError):
    """Raised when the AI reply does not have the expected shape."""
    pass


SEMANTIC_SEARCH_PROMPT = """You are the site search of AURA AI, a wellness, beauty and fitness platform.
Rank the entries of the SEARCH INDEX that best answer the user's query.

SEARCH INDEX:
{corpus}

RULES:
- Return at most {limit} results, best match first.
- Only return entries that exist in the index.
- When a result is a website page, set "target_page" to its "target" value, otherwise null.
- Write titles and descriptions in the language with code "{locale}".

Return ONLY this JSON structure:
{{"results": [{{"title": "...", "description": "...", "target_page": "page id or null", "relevance": 0.0}}]}}"""

PROVIDER_LOOKUP_PROMPT = """Find real {category} that match the request: "{query}".
{location_hint}
Write names and addresses in the language with code "{locale}".

Return ONLY this JSON structure:
{{"providers": [{{"name": "...", "address": "...", "phone": "... or null", "rating": 4.5, "maps_uri": "... or null", "distance_km": 1.2, "specialty": "... or null"}}]}}"""

CONTENT_PROMPT = """Write a {content_type} post for AURA AI, a wellness, beauty and fitness brand.
Topic: {topic}
Tone: {tone}
Language code: {locale}
Return only the post text in markdown."""

CHAT_SYSTEM_PROMPT = (
    "You are AURA AI, a friendly coach for wellness, beauty and fitness. "
    "Answer concisely and never give a medical diagnosis."
)


def _log_metrics(response, caller: str = "unknown") -> None:
    """
    Log and export LLM performance metrics from an Ollama response.

    Ollama returns timing data in nanoseconds. We convert to human-readable format
    and emit OpenTelemetry metrics.
    """
    total_ns = response.get("total_duration") or 0
    prompt_eval_ns = response.get("prompt_eval_duration") or 0
    eval_ns = response.get("eval_duration") or 0
    load_ns = response.get("load_duration") or 0
    prompt_tokens = response.get("prompt_eval_count") or 0
    completion_tokens = response.get("eval_count") or 0

    total_ms = total_ns / 1_000_000
    ttft_ms = (load_ns + prompt_eval_ns) / 1_000_000
    tps = (completion_tokens / (eval_ns / 1_000_000_000)) if eval_ns > 0 else 0

    logger.info(
        f"[{caller}] "
        f"total={total_ms:.0f}ms | "
        f"TTFT={ttft_ms:.0f}ms | "
        f"tokens={prompt_tokens}→{completion_tokens} | "
        f"TPS={tps:.1f}"
    )

    attrs = {"caller": caller, "model": LLM_MODEL}
    llm_ttft.record(ttft_ms, attributes=attrs)
    llm_total_duration.record(total_ms, attributes=attrs)
    llm_tps.record(tps, attributes=attrs)
    llm_prompt_tokens.add(prompt_tokens, attributes=attrs)
    llm_completion_tokens.add(completion_tokens, attributes=attrs)


def _get_llm_options() -> dict:
    """Build the options dict for Ollama calls from config."""
    return {
        "num_ctx": LLM_NUM_CTX,
        "temperature": LLM_TEMPERATURE,
    }


def _upstream_error(e: ollama.ResponseError) -> AIServiceError:
    # Keep the HTTP status in the text: quota detection matches on "429"
    return AIServiceError(f"{e.status_code}: {e.error}")


def parse_json_reply(content: str, key: str) -> list[dict]:
    """
    Extract the list stored under `key` from a JSON reply.

    Tolerates prose around the JSON object by slicing from the first "{"
    to the last "}".

    Raises:
        AIContractError: if no object or no list under `key` can be found.
    """
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end <= start:
        raise AIContractError(f"AI reply is not JSON: {content[:80]!r}")
    try:
        data = json.loads(content[start : end + 1])
    except json.JSONDecodeError as e:
        raise AIContractError(f"AI reply is not valid JSON: {e}") from e

    items = data.get(key)
    if not isinstance(items, list):
        raise AIContractError(f"AI reply has no '{key}' list")
    return [item for item in items if isinstance(item, dict)]


class AIServices:
    """Async facade over the Ollama chat API."""

    def __init__(self, client: ollama.AsyncClient | None = None, model: str = LLM_MODEL):
        self.client = client or ollama.AsyncClient(host=OLLAMA_HOST, timeout=OLLAMA_TIMEOUT_SECONDS)
        self.model = model

    async def _chat(self, prompt: str, caller: str, json_format: bool = False) -> str:
        logger.debug(f"LLM CALL from {caller}: {len(prompt)} prompt chars")
        try:
            response = await self.client.chat(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                format="json" if json_format else None,
                options=_get_llm_options(),
            )
        except ollama.ResponseError as e:
            raise _upstream_error(e) from e
        _log_metrics(response, caller=caller)
        return response["message"]["content"]

    async def semantic_search(self, query: str, corpus: str, locale: str) -> list[SearchResultItem]:
        prompt = SEMANTIC_SEARCH_PROMPT.format(
            corpus=corpus, limit=SEARCH_RESULTS_COUNT, locale=locale
        ) + f"\n\nQuery: {query}"
        content = await self._chat(prompt, caller="semantic_search", json_format=True)
        results: list[SearchResultItem] = []
        for item in parse_json_reply(content, "results"):
            if not item.get("title"):
                continue
            results.append(
                {
                    "title": str(item["title"]),
                    "description": str(item.get("description") or ""),
                    "target_page": item.get("target_page") or None,
                    "relevance": item.get("relevance"),
                }
            )
        return results[:SEARCH_RESULTS_COUNT]

    async def provider_lookup(
        self,
        query: str,
        category: str,
        coordinate: GeoCoordinate | None,
        locale: str,
    ) -> list[ProviderSearchResult]:
        if coordinate is not None:
            location_hint = f"The user is at latitude {coordinate['lat']}, longitude {coordinate['lon']}; prefer nearby results."
        else:
            location_hint = "The user's position is unknown; rely on any place named in the request."
        prompt = PROVIDER_LOOKUP_PROMPT.format(
            category=category, query=query, location_hint=location_hint, locale=locale
        )
        content = await self._chat(prompt, caller="provider_lookup", json_format=True)
        providers: list[ProviderSearchResult] = []
        for item in parse_json_reply(content, "providers"):
            if not item.get("name"):
                continue
            providers.append(
                {
                    "name": str(item["name"]),
                    "address": str(item.get("address") or ""),
                    "phone": item.get("phone"),
                    "rating": item.get("rating"),
                    "maps_uri": item.get("maps_uri"),
                    "distance_km": item.get("distance_km"),
                    "specialty": item.get("specialty"),
                }
            )
        return providers

    async def generate_content(self, topic: str, content_type: str, tone: str, locale: str) -> str:
        prompt = CONTENT_PROMPT.format(
            content_type=content_type, topic=topic, tone=tone, locale=locale
        )
        return await self._chat(prompt, caller="generate_content")

    async def stream_chat(self, history: list[ChatMessage]) -> AsyncIterator[str]:
        """
        Stream the coach's reply to the conversation so far.

        Yields:
            str: Individual tokens or small chunks as they become available
        """
        messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
        for turn in history:
            role = "assistant" if turn["role"] == "model" else "user"
            messages.append({"role": role, "content": turn["text"]})

        try:
            stream = await self.client.chat(
                model=self.model,
                messages=messages,
                stream=True,
                options=_get_llm_options(),
            )
            last_chunk = None
            async for chunk in stream:
                last_chunk = chunk
                token = chunk["message"]["content"]
                if token:
                    yield token
        except ollama.ResponseError as e:
            raise _upstream_error(e) from e

        # Last chunk contains metrics when done=True
        if last_chunk is not None and last_chunk.get("done"):
            _log_metrics(last_chunk, caller="stream_chat")
