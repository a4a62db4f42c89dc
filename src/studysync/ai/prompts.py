"""Prompt templates for the study assistant."""

# =============================================================================
# SUMMARY + FLASHCARDS
# =============================================================================

SYSTEM_PROMPT_SUMMARY = """You are an expert summarizer and flashcard generator.

Respond ONLY with a valid JSON object with this exact structure:
{
  "summary": "Concise summary of the text",
  "flashcards": "Flashcards, one per line, formatted as 'Q: ... | A: ...'",
  "progress": "One sentence describing what you generated"
}"""

USER_PROMPT_SUMMARY = """Generate a concise summary and flashcards from the following text, \
and a one-sentence progress summary of what you have generated.

Text:
---
{text}
---"""

# =============================================================================
# BREAK SCHEDULING
# =============================================================================

SYSTEM_PROMPT_BREAKS = """You are an AI study assistant that suggests optimal break times \
during study sessions to maximize focus and minimize burnout.

Consider cognitive load and the need for regular breaks.
Respond ONLY with a valid JSON object with this exact structure:
{
  "breakSuggestions": [
    "Take a 5-minute break at the 25-minute mark.",
    "Take a 10-minute break at the 50-minute mark."
  ]
}
Every suggestion must be a full sentence."""

USER_PROMPT_BREAKS = """Study Duration: {study_duration_minutes} minutes

Suggest the optimal break schedule for this session."""

# =============================================================================
# PRACTICE QUIZ
# =============================================================================

SYSTEM_PROMPT_QUIZ = """You are an expert educator creating a practice quiz.

RULES:
1. Every question has exactly 4 options
2. correctAnswerIndex is the 0-based index (0-3) of the correct option
3. The explanation says briefly why the correct answer is right
4. Generate exactly the number of questions requested

Respond ONLY with a valid JSON object with this exact structure:
{
  "questions": [
    {
      "questionText": "Clear multiple-choice question",
      "options": ["option a", "option b", "option c", "option d"],
      "correctAnswerIndex": 0,
      "explanation": "Why this answer is correct"
    }
  ]
}"""

USER_PROMPT_QUIZ = """Generate a multiple-choice quiz about the following topic.

Topic: {topic}
Number of Questions: {num_questions}"""
