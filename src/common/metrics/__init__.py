"""OpenTelemetry metrics for AI calls and session health."""

from common.metrics.instruments import (
    errors_surfaced,
    geolocation_fallbacks,
    llm_completion_tokens,
    llm_prompt_tokens,
    llm_total_duration,
    llm_tps,
    llm_ttft,
    quota_trips,
    searches,
)

__all__ = [
    "errors_surfaced",
    "geolocation_fallbacks",
    "llm_completion_tokens",
    "llm_prompt_tokens",
    "llm_total_duration",
    "llm_tps",
    "llm_ttft",
    "quota_trips",
    "searches",
]
