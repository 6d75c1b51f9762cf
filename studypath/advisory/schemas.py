"""Request and result models for the six advisory domains.

Requests are what the student typed into a form; results are what we accept
back from the model. Both use camelCase on the wire (the form payloads and
the JSON the prompts ask for) and snake_case in Python.

Result scalars are strict: a score of ``"82"`` is a schema violation, not
an 82.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, List, Optional, Tuple, Type, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel


class Domain(str, Enum):
    PROFILE = "profile"
    DOCUMENT = "document"
    RESEARCH = "research"
    VISA = "visa"
    CULTURAL = "cultural"
    CAREER = "career"


def _number_only(value):
    # bool is an int subclass; neither it nor numeric strings count.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("expected a number")
    return value


Score = Annotated[float, BeforeValidator(_number_only), Field(ge=0, le=100, allow_inf_nan=False)]
Amount = Annotated[float, BeforeValidator(_number_only), Field(ge=0, allow_inf_nan=False)]


class AdvisoryRequest(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class AdvisoryResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# --- Requests ---

class ProfileRequest(AdvisoryRequest):
    gpa: Union[float, str] = Field(..., description="GPA as a number or as typed, e.g. '3.8/4.0'")
    toefl_score: int
    sat_gre_score: int
    budget: float = Field(..., description="Annual budget in USD")
    field_of_study: str
    extracurriculars: Optional[str] = None


class DocumentRequest(AdvisoryRequest):
    document_type: str = Field(..., description="e.g. 'Statement of Purpose', 'CV'")
    content: str


class ResearchRequest(AdvisoryRequest):
    primary_area: str
    specific_topics: Optional[str] = None
    preferred_universities: Tuple[str, ...] = ()


class VisaRequest(AdvisoryRequest):
    nationality: str
    destination_country: str
    program_type: str


class CulturalRequest(AdvisoryRequest):
    origin_country: str
    destination_country: str


class CareerRequest(AdvisoryRequest):
    field_of_study: str
    career_interests: str
    preferred_location: Optional[str] = None


# --- Results ---

class UniversityMatch(AdvisoryResult):
    name: StrictStr
    program: StrictStr
    cost: Amount = Field(..., description="Estimated annual cost in USD")
    match_score: Score


class ProfileResult(AdvisoryResult):
    strength_score: Score = Field(..., description="Overall profile strength from 0-100")
    university_matches: List[UniversityMatch]


class DocumentResult(AdvisoryResult):
    suggestions: List[StrictStr]
    enhanced_content: StrictStr


class ProfessorMatch(AdvisoryResult):
    name: StrictStr
    university: StrictStr
    specialization: StrictStr
    match_score: Score
    publications: List[StrictStr] = Field(default_factory=list)


class ResearchResult(AdvisoryResult):
    professor_matches: List[ProfessorMatch]
    proposal_enhancement: Optional[StrictStr] = None


class VisaResult(AdvisoryResult):
    visa_type: StrictStr
    document_status: StrictStr
    interview_tips: List[StrictStr]
    processing_info: Optional[StrictStr] = None


class CulturalResult(AdvisoryResult):
    cultural_tips: List[StrictStr]
    communities: List[StrictStr] = Field(..., description="Student groups and communities to join")


class CareerResult(AdvisoryResult):
    career_paths: List[StrictStr]
    job_matches: List[StrictStr]
    immigration_info: StrictStr


REQUEST_MODELS: Dict[Domain, Type[AdvisoryRequest]] = {
    Domain.PROFILE: ProfileRequest,
    Domain.DOCUMENT: DocumentRequest,
    Domain.RESEARCH: ResearchRequest,
    Domain.VISA: VisaRequest,
    Domain.CULTURAL: CulturalRequest,
    Domain.CAREER: CareerRequest,
}

RESULT_MODELS: Dict[Domain, Type[AdvisoryResult]] = {
    Domain.PROFILE: ProfileResult,
    Domain.DOCUMENT: DocumentResult,
    Domain.RESEARCH: ResearchResult,
    Domain.VISA: VisaResult,
    Domain.CULTURAL: CulturalResult,
    Domain.CAREER: CareerResult,
}


def coerce_request(domain: Domain, request) -> AdvisoryRequest:
    """Return ``request`` as the domain's request model.

    Accepts an instance of the right model or a plain mapping of form
    fields. Raises ``TypeError`` for a model belonging to another domain.
    """

    model = REQUEST_MODELS[Domain(domain)]
    if isinstance(request, model):
        return request
    if isinstance(request, AdvisoryRequest):
        raise TypeError(f"{type(request).__name__} is not a request for domain {Domain(domain).value!r}")
    return model.model_validate(request)
