"""AI module - LLM chat explainer."""

from .explainer import (
    ChatContext,
    ExplainerUnavailable,
    build_context_prompt,
    build_prompt,
    explain,
    summarize_points,
)

__all__ = [
    'ChatContext',
    'ExplainerUnavailable',
    'build_context_prompt',
    'build_prompt',
    'explain',
    'summarize_points',
]
