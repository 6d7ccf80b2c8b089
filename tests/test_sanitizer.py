import json
import pytest
from careercoach.core.errors import MalformedOutputFailure, SchemaValidationFailure
from careercoach.services.sanitizer import (
    IndustryInsightSchema, GeneratedQuiz, sanitize, sanitize_insight, sanitize_quiz, sanitize_text, strip_fences,
)
from fakes import insight_payload, quiz_payload, fenced


def test_fenced_and_unfenced_parse_identically():
    plain = sanitize_insight(json.dumps(insight_payload()))
    assert sanitize_insight(fenced(insight_payload())) == plain
    assert sanitize_insight(fenced(insight_payload(), tag="")) == plain
    assert sanitize_insight("  \n```JSON\n" + json.dumps(insight_payload()) + "\n```  \n") == plain


def test_strip_fences_inline():
    assert strip_fences('```json{"a": 1}```') == '{"a": 1}'
    assert strip_fences("  plain text \n") == "plain text"


def test_valid_insight_fields():
    rec = sanitize_insight(json.dumps(insight_payload()))
    assert rec.demand_level == "High"
    assert rec.market_outlook == "Positive"
    assert rec.salary_ranges[0].median == 115000
    assert rec.top_skills == ["Python", "Cloud", "SQL"]


def test_enum_case_is_normalized():
    rec = sanitize_insight(json.dumps(insight_payload(demandLevel="HIGH", marketOutlook="neutral")))
    assert rec.demand_level == "High"
    assert rec.market_outlook == "Neutral"


@pytest.mark.parametrize("raw", ["not json at all", "```json\n{\"growthRate\": 1,\n```", "", "{'single': 'quotes'}"])
def test_malformed_output(raw):
    with pytest.raises(MalformedOutputFailure):
        sanitize_insight(raw)


def test_out_of_enum_demand_level_names_field():
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize_insight(json.dumps(insight_payload(demandLevel="Extreme")))
    assert ei.value.field == "demandLevel"


def test_missing_field_is_named():
    data = insight_payload()
    del data["keyTrends"]
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize_insight(json.dumps(data))
    assert ei.value.field == "keyTrends"


def test_numbers_must_be_numeric():
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize_insight(json.dumps(insight_payload(growthRate="12%")))
    assert ei.value.field == "growthRate"

    data = insight_payload()
    data["salaryRanges"][1]["median"] = "125000"
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize_insight(json.dumps(data))
    assert ei.value.field == "salaryRanges.1.median"


def test_arrays_must_be_arrays():
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize_insight(json.dumps(insight_payload(topSkills="Python, SQL")))
    assert ei.value.field == "topSkills"


def test_top_level_must_be_object():
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize(json.dumps([insight_payload()]), IndustryInsightSchema)
    assert ei.value.field == "<root>"


def test_quiz_needs_ten_questions():
    assert len(sanitize_quiz(fenced(quiz_payload())).questions) == 10
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize_quiz(json.dumps(quiz_payload(9)))
    assert ei.value.field == "questions"


def test_quiz_answer_must_be_an_option():
    data = quiz_payload()
    data["questions"][3]["correctAnswer"] = "E3"
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize(json.dumps(data), GeneratedQuiz)
    assert ei.value.field == "questions.3.correctAnswer"


def test_quiz_needs_four_options():
    data = quiz_payload()
    data["questions"][0]["options"] = ["A0", "B0"]
    with pytest.raises(SchemaValidationFailure) as ei:
        sanitize_quiz(json.dumps(data))
    assert ei.value.field == "questions.0.options"


def test_sanitize_text():
    assert sanitize_text("```\nKeep practicing joins.\n```") == "Keep practicing joins."
    with pytest.raises(MalformedOutputFailure):
        sanitize_text("```\n\n```")
