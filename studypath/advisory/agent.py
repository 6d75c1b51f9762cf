"""Domain advisory agent.

:class:`AdvisoryAgent` is one table-driven pipeline for all six domains:
build the prompt, invoke the generative client once, parse the reply into
the domain's result model. Errors from any stage propagate unchanged so the
caller can tell a network failure from a bad model reply.

The agent holds no per-request state; the same instance can serve
overlapping calls.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .client import GenerativeClient, get_generative_client
from .parser import parse
from .prompts import build_prompt
from .schemas import (
    AdvisoryRequest,
    AdvisoryResult,
    CareerResult,
    CulturalResult,
    DocumentResult,
    Domain,
    ProfileResult,
    ResearchResult,
    VisaResult,
)

logger = logging.getLogger(__name__)

RequestLike = Union[AdvisoryRequest, Mapping[str, Any]]


class AdvisoryAgent:
    def __init__(self, client: Optional[GenerativeClient] = None, timeout: Optional[float] = None) -> None:
        self.client = client or get_generative_client()
        self.timeout = timeout

    async def advise(self, domain: Domain, request: RequestLike) -> AdvisoryResult:
        domain = Domain(domain)
        prompt = build_prompt(domain, request)
        logger.info("Requesting %s advice", domain.value)
        raw = await self.client.invoke(prompt, timeout=self.timeout)
        return parse(domain, raw)

    async def evaluate_profile(self, request: RequestLike) -> ProfileResult:
        return await self.advise(Domain.PROFILE, request)

    async def enhance_document(self, request: RequestLike) -> DocumentResult:
        return await self.advise(Domain.DOCUMENT, request)

    async def match_professors(self, request: RequestLike) -> ResearchResult:
        return await self.advise(Domain.RESEARCH, request)

    async def visa_guidance(self, request: RequestLike) -> VisaResult:
        return await self.advise(Domain.VISA, request)

    async def cultural_tips(self, request: RequestLike) -> CulturalResult:
        return await self.advise(Domain.CULTURAL, request)

    async def career_guidance(self, request: RequestLike) -> CareerResult:
        return await self.advise(Domain.CAREER, request)
