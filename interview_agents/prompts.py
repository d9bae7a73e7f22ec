from __future__ import annotations  # Prompt text shared by the mock interviewer agents

from textwrap import dedent

INTERVIEWER_GUIDANCE = dedent(  # System instructions shared by every mock interviewer call
    """
    You are an experienced technical interviewer conducting a realistic mock interview.
    Ask questions in a professional, conversational tone, give constructive feedback,
    propose relevant follow-up questions and evaluate answers fairly using the STAR method.
    Always reply with valid JSON matching the requested schema.

    Scoring guidelines (0-100):
    - 0-20: Poor. Off-topic, irrelevant, or shows a lack of understanding.
    - 21-40: Below average. Partially addresses the question but lacks depth or examples.
    - 41-60: Average. Adequate but could use more specifics.
    - 61-80: Good. Relevant examples and a clear structure.
    - 81-100: Excellent. Demonstrates expertise with strong examples and clear communication.

    Criteria weights: relevance 25%, specific examples (STAR) 25%, clarity and structure 20%,
    technical accuracy 20%, communication 10%.

    STAR: Situation (context set?), Task (responsibility explained?), Action (actions described?),
    Result (measurable outcomes shared?).

    Be encouraging but honest. Focus on helping the candidate improve.
    """
).strip()

EVALUATION_REQUEST = (
    "## Interview Context\n"
    "Job Title: {job_title}\n"
    "Company: {company_name}\n"
    "Job Description:\n{job_description}\n\n"
    "Candidate's Resume:\n{resume_content}\n\n"
    "## Question\n"
    "Category: {category}\n"
    "Difficulty: {difficulty}\n"
    "Question: {question}\n\n"
    "## Candidate's Answer\n{answer}\n\n"
    "Evaluate the answer. Return JSON with score (0-100), feedback (2-4 sentences), suggestedImprovement,"
    " keyPointsCovered, keyPointsMissed and starAnalysis (situation, task, action, result booleans)."
)

FOLLOW_UP_REQUEST = (
    "## Original Question\n"
    "Category: {category}\n"
    "Question: {question}\n\n"
    "## Candidate's Answer\n{answer}\n\n"
    "## Initial Evaluation\n"
    "Score: {score}\n"
    "Feedback: {feedback}\n"
    "Points that could be explored further: {missed}\n\n"
    "## Follow-up Decision\n"
    "Follow-ups already asked for this question: {follow_up_count}\n"
    "Maximum allowed follow-ups: {max_follow_ups}\n\n"
    "Only suggest a follow-up when the answer was incomplete or raised points worth exploring,"
    " the limit has not been reached, and it would help assess depth of knowledge.\n"
    "Return JSON with shouldFollowUp, followUpQuestion (null when not following up) and reason."
)

SUMMARY_REQUEST = (
    "## Job Context\n"
    "Job Title: {job_title}\n"
    "Company: {company_name}\n"
    "{job_description}\n\n"
    "## Interview Responses\n{responses}\n\n"
    "## Summary Request\n"
    "Return JSON with overallScore (0-100, weighted by difficulty), summaryFeedback (3-5 sentences),"
    " strengthAreas (top 3), improvementAreas (top 3), categoryScores (behavioral, technical,"
    " situational, companySpecific, roleSpecific; average of that category's questions or null when"
    " none were asked) and recommendations (3-5 concrete practice suggestions)."
)

__all__ = ["EVALUATION_REQUEST", "FOLLOW_UP_REQUEST", "INTERVIEWER_GUIDANCE", "SUMMARY_REQUEST"]
