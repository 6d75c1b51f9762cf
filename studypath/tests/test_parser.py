import json

import pytest

from studypath.advisory.parser import extract_text, parse
from studypath.advisory.schemas import (
    CareerResult,
    CulturalResult,
    DocumentResult,
    Domain,
    ProfessorMatch,
    ProfileResult,
    ResearchResult,
    UniversityMatch,
    VisaResult,
)
from studypath.errors import MalformedContentError, MalformedEnvelopeError, SchemaViolationError


def gemini_envelope(text: str) -> str:
    return json.dumps({"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]})


KNOWN_RESULTS = {
    Domain.PROFILE: ProfileResult(
        strength_score=82,
        university_matches=[UniversityMatch(name="X", program="MS CS", cost=40000, match_score=90)],
    ),
    Domain.DOCUMENT: DocumentResult(
        suggestions=["Open with a concrete project."],
        enhanced_content="I am committed to advancing AI.",
    ),
    Domain.RESEARCH: ResearchResult(
        professor_matches=[
            ProfessorMatch(
                name="Prof. Smith",
                university="University A",
                specialization="NLP",
                match_score=95,
                publications=["Parsing at scale"],
            )
        ],
        proposal_enhancement="Add a section on recent NLP trends.",
    ),
    Domain.VISA: VisaResult(
        visa_type="F-1",
        document_status="Valid",
        interview_tips=["Practice questions about study plans", "Bring financial proof"],
        processing_info="Usually 3-5 weeks.",
    ),
    Domain.CULTURAL: CulturalResult(
        cultural_tips=["Purchase winter clothing"],
        communities=["International Student Group"],
    ),
    Domain.CAREER: CareerResult(
        career_paths=["Software Engineer"],
        job_matches=["Google"],
        immigration_info="Eligible for OPT in USA",
    ),
}


@pytest.mark.parametrize("domain", list(Domain))
def test_parse_round_trip(domain):
    known = KNOWN_RESULTS[domain]
    raw = gemini_envelope(known.model_dump_json(by_alias=True))

    assert parse(domain, raw) == known


def test_profile_scenario():
    reply = {
        "strengthScore": 82,
        "universityMatches": [{"name": "X", "program": "MS CS", "cost": 40000, "matchScore": 90}],
    }

    result = parse(Domain.PROFILE, gemini_envelope(json.dumps(reply)))

    assert isinstance(result, ProfileResult)
    assert result.strength_score == 82
    assert len(result.university_matches) == 1
    assert result.university_matches[0].name == "X"


def test_parse_accepts_decoded_envelope():
    envelope = json.loads(gemini_envelope('{"culturalTips": [], "communities": ["ISA"]}'))
    assert parse(Domain.CULTURAL, envelope).communities == ["ISA"]


def test_parse_joins_text_parts():
    raw = json.dumps({"candidates": [{"content": {"parts": [
        {"text": '{"culturalTips": ["Layer up"], '},
        {"text": '"communities": []}'},
    ]}}]})
    assert parse(Domain.CULTURAL, raw).cultural_tips == ["Layer up"]


def test_parse_strips_single_code_fence():
    text = '```json\n{"careerPaths": ["Analyst"], "jobMatches": [], "immigrationInfo": "OPT"}\n```'
    assert parse(Domain.CAREER, gemini_envelope(text)).career_paths == ["Analyst"]


def test_chat_completion_envelope_is_accepted():
    raw = json.dumps({"choices": [{"message": {"role": "assistant", "content": '{"suggestions": [], "enhancedContent": "x"}'}}]})
    assert extract_text(raw) == '{"suggestions": [], "enhancedContent": "x"}'
    assert parse(Domain.DOCUMENT, raw).enhanced_content == "x"


@pytest.mark.parametrize(
    "raw",
    [
        '{"foo": 1}',
        "this is not json",
        json.dumps({"candidates": []}),
        json.dumps({"candidates": [{"finishReason": "SAFETY"}]}),
        json.dumps({"candidates": [{"content": {"parts": [{"inlineData": {}}]}}]}),
        json.dumps({"choices": [{"message": {"content": None}}]}),
        json.dumps({"promptFeedback": {"blockReason": "SAFETY"}}),
        json.dumps(["candidates"]),
    ],
)
def test_missing_envelope_is_malformed_envelope(raw):
    with pytest.raises(MalformedEnvelopeError):
        parse(Domain.PROFILE, raw)


@pytest.mark.parametrize("text", ['{strengthScore: 82', "", "Sure! Here is your analysis.", "[1, 2]"])
def test_invalid_inner_content_is_malformed_content(text):
    with pytest.raises(MalformedContentError):
        parse(Domain.PROFILE, gemini_envelope(text))


def test_score_out_of_range_is_schema_violation():
    text = json.dumps({"strengthScore": 120, "universityMatches": []})

    with pytest.raises(SchemaViolationError) as excinfo:
        parse(Domain.PROFILE, gemini_envelope(text))

    assert excinfo.value.field == "strengthScore"


def test_nested_score_out_of_range_names_the_path():
    text = json.dumps({
        "strengthScore": 70,
        "universityMatches": [{"name": "X", "program": "MS", "cost": 1000, "matchScore": -5}],
    })

    with pytest.raises(SchemaViolationError) as excinfo:
        parse(Domain.PROFILE, gemini_envelope(text))

    assert excinfo.value.field == "universityMatches.0.matchScore"


def test_missing_required_field_is_not_defaulted():
    with pytest.raises(SchemaViolationError) as excinfo:
        parse(Domain.PROFILE, gemini_envelope('{"strengthScore": 75}'))

    assert excinfo.value.field == "universityMatches"


@pytest.mark.parametrize("score", ["82", True, None])
def test_non_numeric_score_is_not_coerced(score):
    text = json.dumps({"strengthScore": score, "universityMatches": []})

    with pytest.raises(SchemaViolationError):
        parse(Domain.PROFILE, gemini_envelope(text))


def test_optional_fields_may_be_absent():
    text = json.dumps({"visaType": "F-1", "documentStatus": "Pending", "interviewTips": []})

    result = parse(Domain.VISA, gemini_envelope(text))

    assert result.processing_info is None


@pytest.mark.parametrize("value", ["Infinity", "NaN", "-Infinity"])
def test_non_finite_numbers_are_schema_violations(value):
    text = (
        '{"strengthScore": 70, "universityMatches": '
        f'[{{"name": "X", "program": "MS", "cost": {value}, "matchScore": 80}}]}}'
    )

    with pytest.raises(SchemaViolationError) as excinfo:
        parse(Domain.PROFILE, gemini_envelope(text))

    assert excinfo.value.field == "universityMatches.0.cost"


def test_non_finite_score_is_schema_violation():
    with pytest.raises(SchemaViolationError) as excinfo:
        parse(Domain.PROFILE, gemini_envelope('{"strengthScore": NaN, "universityMatches": []}'))

    assert excinfo.value.field == "strengthScore"
