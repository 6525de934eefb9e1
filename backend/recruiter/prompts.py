"""
Prompt templates for the three model calls: category suggestion,
candidate ranking and post-interview recalibration.

Every builder returns the chat messages ready for ``llm_service.chat``.
"""

from .models import INTERVIEW_QUESTION_COUNT, CategorySet, Ranking, Role

CATEGORY_SYSTEM = (
    "You are an expert HR consultant who creates evaluation frameworks. "
    "Always respond with valid JSON only, no markdown or extra text."
)

RANKING_SYSTEM = (
    "You are an expert HR analyst. Evaluate candidates fairly but honestly. "
    "Don't praise weak CVs. Always respond with valid JSON only, no markdown "
    "formatting, no code blocks, just pure JSON."
)

RECALIBRATION_SYSTEM = (
    "You are an expert HR analyst. Provide fair but honest assessment. "
    "Always respond with valid JSON only."
)


CATEGORY_PROMPT = """
You are an expert HR consultant. Based on this job role, suggest:
1. The 5 main evaluation categories with recommended weights (must total 100%)
2. Job-specific sub-categories for evaluation

Job Title: {title}
Job Description: {description}
Required Skills: {required_skills}

Return as JSON with this exact structure:
{{
  "mainCategories": [
    {{ "name": "Category Name", "description": "What this measures", "weight": 20 }}
  ],
  "subCategories": [
    {{ "name": "Sub-category", "relatedToMain": "Main Category Name", "description": "What this measures" }}
  ],
  "evaluationGuidance": "Brief guidance on how to interpret scores"
}}
"""


RANKING_PROMPT = """
You are an expert HR analyst evaluating a candidate against a specific role.

ROLE: {title}
ROLE DESCRIPTION: {description}

EVALUATION CATEGORIES:
{main_categories}

SUB-CATEGORIES:
{sub_categories}

CANDIDATE CV:
{cv_text}

Provide a detailed evaluation in this exact JSON format:
{{
  "overallScore": <0-100>,
  "mainCategoryScores": {{
    "categoryName": <0-100 score>
  }},
  "subCategoryScores": {{
    "subCategoryName": <0-100 score>
  }},
  "summary": "Blunt, direct assessment of candidate fit. Be balanced but honest. Don't compensate for weak CVs with positive comments. 3-5 sentences.",
  "redFlags": ["flag1", "flag2"],
  "interviewQuestions": [
{questions}
  ],
  "aiFeedback": "AI's thoughts about this candidate and their ranking, 2-3 sentences. Be direct and analytical."
}}
"""


RECALIBRATION_PROMPT = """
You are an expert HR analyst reviewing interview feedback.

ORIGINAL EVALUATION:
Overall Score: {overall_score}/100
Summary: {summary}

INTERVIEW NOTES:
{notes}

Based on these interview notes, provide a recalibrated assessment:
{{
  "recalibratedScore": <0-100>,
  "scoreAdjustment": <-20 to +20>,
  "adjustmentReason": "Brief explanation of why score changed",
  "overallAssessment": "Updated holistic assessment 2-3 sentences"
}}
"""


def _messages(system: str, user: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def _format_score(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def category_suggestion_messages(
    title: str, description: str, required_skills: str = "",
) -> list[dict[str, str]]:
    prompt = CATEGORY_PROMPT.format(
        title=title,
        description=description,
        required_skills=required_skills or "Not specified",
    )
    return _messages(CATEGORY_SYSTEM, prompt)


def format_categories(categories: CategorySet) -> tuple[str, str]:
    """Render main and sub categories as the bullet lists used in the ranking prompt."""
    main = "\n".join(
        f"- {c.name} ({c.weight}% weight): {c.description}"
        for c in categories.main_categories
    )
    sub = "\n".join(
        f"- {s.name} ({s.related_to_main}): {s.description}"
        for s in categories.sub_categories
    )
    return main, sub


def candidate_ranking_messages(role: Role, cv_text: str) -> list[dict[str, str]]:
    main, sub = format_categories(role.categories)
    questions = ",\n".join(f'    "question{i}"' for i in range(1, INTERVIEW_QUESTION_COUNT + 1))
    prompt = RANKING_PROMPT.format(
        title=role.title,
        description=role.description,
        main_categories=main,
        sub_categories=sub,
        cv_text=cv_text,
        questions=questions,
    )
    return _messages(RANKING_SYSTEM, prompt)


def recalibration_messages(ranking: Ranking, notes: str) -> list[dict[str, str]]:
    prompt = RECALIBRATION_PROMPT.format(
        overall_score=_format_score(ranking.overall_score),
        summary=ranking.summary,
        notes=notes,
    )
    return _messages(RECALIBRATION_SYSTEM, prompt)
