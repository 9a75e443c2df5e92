"""Relevance Curator Agent

Replaces keyword filtering with a single LLM call that understands the business:
  - selects only articles with a direct link to the company's topics
  - writes a one-line summary, relevance note and an "angle" per article
  - attaches a content plan (type, description, priority, audience) per article

Model: any OpenAI-compatible chat model (CURATOR_MODEL), optionally through a LiteLLM proxy.
"""
from curator_agent.agent import RelevanceCurator
from curator_agent.tools import parse_curator_output

__all__ = ["RelevanceCurator", "parse_curator_output"]
