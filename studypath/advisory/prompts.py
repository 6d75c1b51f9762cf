"""Prompt templates for the advisory domains.

Each template renders one user prompt from a domain request. The builders
are pure: the same request always renders byte-identical text. Every prompt
ends with the JSON contract the parser enforces, so the model is told the
exact field names and ranges we will accept.
"""

from __future__ import annotations

import json
from typing import Callable, Dict, List

from .schemas import (
    CareerRequest,
    CulturalRequest,
    DocumentRequest,
    Domain,
    ProfileRequest,
    RESULT_MODELS,
    ResearchRequest,
    VisaRequest,
    coerce_request,
)

SYSTEM_INSTRUCTIONS = (
    "You are an AI assistant for international students. "
    "Provide helpful, accurate responses in JSON format as requested."
)

OUTPUT_RULES = """
OUTPUT RULES:
- Respond with ONLY a single JSON object. No markdown fences, no prose before or after it.
- Use exactly the field names listed below (camelCase).
- Every required field must be present. Scores are numbers from 0 to 100, costs are numbers in USD.
""".strip()


def _lines(pairs: List[tuple]) -> str:
    """Render ``label: value`` lines, omitting empty optional values."""
    out = []
    for label, value in pairs:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        out.append(f"{label}: {value}")
    return "\n".join(out)


def _profile(req: ProfileRequest) -> str:
    details = _lines([
        ("GPA", req.gpa),
        ("TOEFL", req.toefl_score),
        ("SAT/GRE", req.sat_gre_score),
        ("Budget", f"${req.budget:,.0f} per year"),
        ("Field", req.field_of_study),
        ("Extracurriculars", req.extracurriculars),
    ])
    return (
        "Analyze this student profile and provide a strength score (0-100) "
        "and university recommendations that fit the budget and field.\n"
        f"{details}\n\n"
        "Return JSON with: strengthScore (0-100), universityMatches "
        "(array with name, program, cost, matchScore 0-100), best match first."
    )


def _document(req: DocumentRequest) -> str:
    return (
        f"Analyze and improve this {req.document_type}:\n"
        "<<<\n"
        f"{req.content}\n"
        ">>>\n\n"
        "Return JSON with: suggestions (array of improvement suggestions), "
        "enhancedContent (improved version of the content)."
    )


def _research(req: ResearchRequest) -> str:
    universities = ", ".join(req.preferred_universities) if req.preferred_universities else None
    details = _lines([
        ("Primary Area", req.primary_area),
        ("Topics", req.specific_topics),
        ("Universities", universities),
    ])
    return (
        "Find professors matching these research interests:\n"
        f"{details}\n\n"
        "Return JSON with: professorMatches (array with name, university, specialization, "
        "matchScore 0-100, publications array), proposalEnhancement (one suggestion to "
        "strengthen a research proposal in this area)."
    )


def _visa(req: VisaRequest) -> str:
    details = _lines([
        ("Nationality", req.nationality),
        ("Destination", req.destination_country),
        ("Program", req.program_type),
    ])
    return (
        "Provide visa requirements and interview tips for:\n"
        f"{details}\n\n"
        "Return JSON with: visaType, documentStatus, interviewTips (array), processingInfo."
    )


def _cultural(req: CulturalRequest) -> str:
    return (
        f"Provide cultural adaptation tips for someone from {req.origin_country} "
        f"going to {req.destination_country}.\n\n"
        "Return JSON with: culturalTips (array), communities (array of student groups)."
    )


def _career(req: CareerRequest) -> str:
    details = _lines([
        ("Field", req.field_of_study),
        ("Interests", req.career_interests),
        ("Location", req.preferred_location),
    ])
    return (
        "Provide career guidance for:\n"
        f"{details}\n\n"
        "Return JSON with: careerPaths (array), jobMatches (array), immigrationInfo "
        "(work-authorization notes for international graduates)."
    )


TEMPLATES: Dict[Domain, Callable] = {
    Domain.PROFILE: _profile,
    Domain.DOCUMENT: _document,
    Domain.RESEARCH: _research,
    Domain.VISA: _visa,
    Domain.CULTURAL: _cultural,
    Domain.CAREER: _career,
}


def expected_schema(domain: Domain) -> str:
    """JSON Schema of the domain result, serialized with sorted keys."""
    schema = RESULT_MODELS[Domain(domain)].model_json_schema(by_alias=True)
    return json.dumps(schema, sort_keys=True)


def build_prompt(domain: Domain, request) -> str:
    domain = Domain(domain)
    body = TEMPLATES[domain](coerce_request(domain, request))
    return f"{body}\n\n{OUTPUT_RULES}\n\nEXPECTED SCHEMA:\n{expected_schema(domain)}"
