"""Core study-tracking logic.

Modules:
- models: Subject/Chapter/SubTopic/Reference tree and update requests
- study_store: StudyDataStore, the owner of the tree
- storage: Durable key/value backends
- progress: Completion percentages and next-up lookup
- pomodoro: Focus/break timer
- quiz_session: Practice quiz answering and scoring
"""

__all__ = [
    "models",
    "study_store",
    "storage",
    "progress",
    "pomodoro",
    "quiz_session",
]
