"""
Prompt construction for every generated content kind.

All builders are pure: they only format their arguments into prompt text.
JSON-producing kinds spell out the exact output contract the sanitizer checks.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ContentKind(str, Enum):
    """Kinds of generated content."""
    INDUSTRY_INSIGHT = "industry_insight"
    QUIZ = "quiz"
    IMPROVEMENT_TIP = "improvement_tip"
    RESUME_SECTION = "resume_section"
    COVER_LETTER = "cover_letter"


JSON_ONLY = "Return ONLY valid JSON matching the schema below, with no additional text, notes, or markdown formatting."

INSIGHT_SCHEMA = """{
  "salaryRanges": [
    { "role": "string", "min": number, "max": number, "median": number, "location": "string" }
  ],
  "growthRate": number,
  "demandLevel": "High" | "Medium" | "Low",
  "topSkills": ["string"],
  "marketOutlook": "Positive" | "Neutral" | "Negative",
  "keyTrends": ["string"],
  "recommendedSkills": ["string"]
}"""

QUIZ_SCHEMA = """{
  "questions": [
    {
      "question": "string",
      "options": ["string", "string", "string", "string"],
      "correctAnswer": "string",
      "explanation": "string"
    }
  ]
}"""


def build_insight_prompt(industry: str) -> str:
    """Prompt for a full IndustryInsight record."""
    return f"""Analyze the current state of the {industry} industry and provide insights in ONLY the following JSON format without any additional notes or explanations:
{INSIGHT_SCHEMA}

IMPORTANT: {JSON_ONLY}
Required fields: salaryRanges (array of objects with role, min, max, median, location), growthRate (number, percent),
demandLevel (one of High, Medium, Low), topSkills (array of strings), marketOutlook (one of Positive, Neutral, Negative),
keyTrends (array of strings), recommendedSkills (array of strings).
Include at least 5 common roles for salary ranges.
Growth rate should be a percentage.
Include at least 5 skills and trends.
"""


def build_quiz_prompt(industry: str, skills: Optional[Sequence[str]] = None, count: int = 10) -> str:
    """Prompt for a multiple-choice technical quiz."""
    skills_part = f" with expertise in {', '.join(skills)}" if skills else ""
    return f"""Generate {count} technical interview questions for a {industry} professional{skills_part}.

Each question should be multiple choice with exactly 4 options, exactly one correct answer, and an explanation.
The value of correctAnswer must be identical to one of the 4 options.
Generate exactly {count} questions.

IMPORTANT: {JSON_ONLY}
{QUIZ_SCHEMA}
"""


def build_improvement_tip_prompt(industry: str, wrong_answers: List[Dict[str, Any]]) -> str:
    """Prompt for a short improvement tip based on the wrongly answered questions."""
    wrong_text = "\n\n".join(
        f'Question: "{q["question"]}"\nCorrect Answer: "{q["answer"]}"\nUser Answer: "{q["user_answer"]}"'
        for q in wrong_answers
    )
    return f"""The user got the following {industry} technical interview questions wrong:

{wrong_text}

Based on these mistakes, provide a concise, specific improvement tip.
Focus on the knowledge gaps revealed by these wrong answers.
Keep the response under 2 sentences and make it encouraging.
Don't explicitly mention the mistakes, instead focus on what to learn/practice.
Respond with plain text only.
"""


def build_resume_section_prompt(section_type: str, current: str, industry: Optional[str] = None) -> str:
    """Prompt asking for an improved rewrite of one resume section."""
    who = f"a {industry} professional" if industry else "a professional"
    return f"""As an expert resume writer, improve the following {section_type} description for {who}.
Make it more impactful, quantifiable, and aligned with industry standards.
Current content: "{current}"

Requirements:
1. Use action verbs
2. Include metrics and results where possible
3. Highlight relevant technical skills
4. Keep it concise but detailed
5. Focus on achievements over responsibilities
6. Use industry-specific keywords

Format the response as a single paragraph of plain text without any additional text or explanations.
"""


def build_cover_letter_prompt(
    job_title: str,
    company_name: str,
    job_description: str = "",
    industry: Optional[str] = None,
    experience: Optional[int] = None,
    skills: Optional[Sequence[str]] = None,
    bio: Optional[str] = None,
) -> str:
    """Prompt for a markdown cover letter."""
    return f"""Write a professional cover letter for a {job_title} position at {company_name}.

About the candidate:
- Industry: {industry or "not specified"}
- Years of Experience: {experience if experience is not None else "not specified"}
- Skills: {", ".join(skills) if skills else "not specified"}
- Professional Background: {bio or "not specified"}

Job Description:
{job_description or "not provided"}

Requirements:
1. Use a professional, enthusiastic tone
2. Highlight relevant skills and experience
3. Show understanding of the company's needs
4. Keep it concise (max 400 words)
5. Use proper business letter formatting in markdown
6. Include specific examples of achievements
7. Relate candidate's background to job requirements

Format the letter in markdown.
"""


_BUILDERS = {
    ContentKind.INDUSTRY_INSIGHT: build_insight_prompt,
    ContentKind.QUIZ: build_quiz_prompt,
    ContentKind.IMPROVEMENT_TIP: build_improvement_tip_prompt,
    ContentKind.RESUME_SECTION: build_resume_section_prompt,
    ContentKind.COVER_LETTER: build_cover_letter_prompt,
}


def build_prompt(kind: ContentKind, **params: Any) -> str:
    """Dispatch to the builder for ``kind``."""
    return _BUILDERS[ContentKind(kind)](**params)
