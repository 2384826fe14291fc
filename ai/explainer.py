"""
Chat Explainer - answers a question about the series on screen.

All math is done with pandas here; the model receives pre-computed numbers
and the series itself, never a request to calculate.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from config import config

logger = logging.getLogger(__name__)

# Lazy import Anthropic to avoid startup issues
_client = None


class ExplainerUnavailable(Exception):
    """No LLM credentials configured."""


@dataclass
class ChatContext:
    """What the user is looking at."""

    country: str
    indicator: str
    time_range: str
    data: List[Dict[str, Any]] = field(default_factory=list)  # [{'date'|'year': str, 'value': float}]


def get_client():
    """Get or create the Anthropic client."""
    global _client
    if _client is None:
        if not config.anthropic_api_key:
            return None
        from anthropic import Anthropic
        _client = Anthropic(api_key=config.anthropic_api_key)
    return _client


def summarize_points(data: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Latest/earliest/trend/avg/max/min over the numeric points.

    Accepts points keyed by 'date' (envelope form) or 'year' (chart form).
    Returns None when there is nothing numeric to describe.
    """
    if not data:
        return None

    df = pd.DataFrame({
        'date': [str(p.get('date', p.get('year', ''))) for p in data],
        'value': pd.to_numeric([p.get('value') for p in data], errors='coerce'),
    }).dropna().sort_values('date')

    if df.empty:
        return None

    first = df.iloc[0]
    last = df.iloc[-1]
    change_pct = None
    if first['value'] != 0:
        change_pct = round((last['value'] - first['value']) / first['value'] * 100, 2)

    return {
        'points': len(df),
        'latest_date': last['date'],
        'latest': float(last['value']),
        'earliest_date': first['date'],
        'earliest': float(first['value']),
        'trend': 'increasing' if last['value'] >= first['value'] else 'decreasing',
        'change_pct': change_pct,
        'avg': round(float(df['value'].mean()), 2),
        'max': round(float(df['value'].max()), 2),
        'min': round(float(df['value'].min()), 2),
        'recent': [(row.date, float(row.value)) for row in df.tail(10).itertuples()],
        'series': [(row.date, float(row.value)) for row in df.itertuples()],
    }


def build_context_prompt(context: ChatContext) -> str:
    """Render the series and its pre-computed stats for the prompt."""
    stats = summarize_points(context.data)
    header = f"{context.country} | {context.indicator} | {context.time_range}"
    if stats is None:
        return f"Context: {header} (no numeric data provided)\n"

    change = f"{stats['change_pct']}%" if stats['change_pct'] is not None else 'N/A'
    recent = ', '.join(f"{d}: {v}" for d, v in stats['recent'])
    full = '\n'.join(f"{d}: {v}" for d, v in stats['series'])

    return (
        "Context\n"
        f"- Country: {context.country}\n"
        f"- Indicator: {context.indicator}\n"
        f"- Range: {context.time_range}\n"
        f"- Points: {stats['points']}\n"
        f"- Latest ({stats['latest_date']}): {stats['latest']}\n"
        f"- Trend: {stats['trend']} ({change} from {stats['earliest_date']})\n"
        f"- Avg: {stats['avg']:.2f} | Max: {stats['max']:.2f} | Min: {stats['min']:.2f}\n"
        f"- Recent: {recent}\n\n"
        f"Full series (year:value)\n{full}\n"
    )


def build_prompt(message: str, context: Optional[ChatContext]) -> str:
    prompt = "You are a senior economic analyst. Provide concise, data-aware answers.\n\n"
    if context:
        prompt += build_context_prompt(context) + "\n"
        prompt += "Considering the above data, answer the question below.\n\n"
    prompt += f"User question: {message}\n\n"
    prompt += (
        "Guidelines:\n"
        "- Use specific numbers from data when present\n"
        "- Explain trends clearly\n"
        "- Keep under ~250 words\n"
        "- Use short paragraphs or bullet points when listing items\n"
    )
    return prompt


def explain(message: str, context: Optional[ChatContext] = None) -> str:
    """
    Ask the model about the series.

    Raises:
        ExplainerUnavailable: no API key configured
    """
    client = get_client()
    if client is None:
        raise ExplainerUnavailable("LLM API key not configured")

    response = client.messages.create(
        model=config.default_model,
        max_tokens=config.chat_max_tokens,
        messages=[{"role": "user", "content": build_prompt(message, context)}]
    )
    text = '\n'.join(
        block.text for block in response.content if getattr(block, 'text', None)
    ).strip()
    logger.info("[AI] Explainer answered %d chars", len(text))
    return text
