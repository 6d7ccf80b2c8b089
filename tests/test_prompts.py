from careercoach.services.prompts import ContentKind, build_prompt, build_insight_prompt, build_quiz_prompt, build_improvement_tip_prompt


def test_insight_prompt_states_full_contract():
    p = build_insight_prompt("tech-software")
    assert "tech-software" in p
    assert "ONLY valid JSON" in p
    for field in ("salaryRanges", "growthRate", "demandLevel", "topSkills", "marketOutlook", "keyTrends", "recommendedSkills"):
        assert field in p
    assert '"High" | "Medium" | "Low"' in p
    assert '"Positive" | "Neutral" | "Negative"' in p


def test_quiz_prompt_mandates_ten_mcqs():
    p = build_quiz_prompt("finance-banking", ["Excel", "Risk"])
    assert "Generate 10 technical interview questions" in p
    assert "exactly 4 options" in p
    assert "correctAnswer" in p and "explanation" in p
    assert "Excel, Risk" in p


def test_quiz_prompt_without_skills():
    assert "expertise" not in build_quiz_prompt("retail")


def test_tip_prompt_lists_wrong_answers():
    p = build_improvement_tip_prompt("tech", [{"question": "What is a JOIN?", "answer": "A", "user_answer": "B"}])
    assert 'Question: "What is a JOIN?"' in p
    assert 'User Answer: "B"' in p


def test_dispatch_by_kind():
    assert build_prompt(ContentKind.INDUSTRY_INSIGHT, industry="x") == build_insight_prompt("x")
    assert build_prompt("quiz", industry="x", skills=None) == build_quiz_prompt("x")
    assert "Acme" in build_prompt(ContentKind.COVER_LETTER, job_title="Engineer", company_name="Acme")
    assert "summary" in build_prompt(ContentKind.RESUME_SECTION, section_type="summary", current="I code.")
