"""Deterministic prompt rendering for each scenario template."""

from . import business, policy
from .business import render_business_prompt
from .policy import render_policy_prompt

__all__ = [
    "business",
    "policy",
    "render_business_prompt",
    "render_policy_prompt",
]
