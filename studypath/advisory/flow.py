"""AI-mode switch for advisory calls.

Callers decide per call whether AI mode is on and pass that decision in.
With AI mode off the placeholder path supplied by the caller is used and
the agent (and therefore the network) is never touched.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .agent import AdvisoryAgent, RequestLike
from .schemas import Domain

Fallback = Callable[[Domain, RequestLike], Any]

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AdvisoryOutcome:
    domain: Domain
    result: Any
    ai_enabled: bool


def ai_enabled_from_env(default: bool = False) -> bool:
    """Read ``STUDYPATH_AI_ENABLED``; meant for entrypoints, not library code."""
    value = os.getenv("STUDYPATH_AI_ENABLED")
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


async def run_advisory(
    domain: Domain,
    request: RequestLike,
    *,
    ai_enabled: bool,
    fallback: Fallback,
    agent: Optional[AdvisoryAgent] = None,
) -> AdvisoryOutcome:
    domain = Domain(domain)
    if not ai_enabled:
        return AdvisoryOutcome(domain=domain, result=fallback(domain, request), ai_enabled=False)

    agent = agent or AdvisoryAgent()
    result = await agent.advise(domain, request)
    return AdvisoryOutcome(domain=domain, result=result, ai_enabled=True)
