"""Tests for progress computations."""

from studysync.core.models import Chapter, Subject, SubTopic
from studysync.core.progress import next_sub_topic, overall_progress, subject_progress


def _subject(subject_id, *chapters):
    return Subject(id=subject_id, title=f"Subject {subject_id}", color="#ef4444", chapters=chapters)


def _chapter(chapter_id, *completed_flags):
    return Chapter(
        id=chapter_id,
        title=f"Chapter {chapter_id}",
        sub_topics=tuple(
            SubTopic(id=f"{chapter_id}-t{i}", title=f"Topic {i}", completed=flag)
            for i, flag in enumerate(completed_flags)
        ),
    )


class TestSubjectProgress:
    def test_no_sub_topics_is_zero(self):
        """Empty subjects report 0, not a division error."""
        assert subject_progress(_subject("s1")) == 0.0
        assert subject_progress(_subject("s1", _chapter("c1"))) == 0.0

    def test_one_of_four(self):
        assert subject_progress(_subject("s1", _chapter("c1", True, False, False, False))) == 25.0

    def test_counts_across_chapters(self):
        """Progress spans every chapter of the subject."""
        subject = _subject("s1", _chapter("c1", True, True), _chapter("c2", False, False))

        assert subject_progress(subject) == 50.0


class TestOverallProgress:
    def test_empty(self):
        progress = overall_progress([])

        assert progress.total == 0
        assert progress.completed == 0
        assert progress.percentage == 0.0

    def test_across_subjects(self):
        """Totals add up over all subjects."""
        subjects = [
            _subject("s1", _chapter("c1", True, False)),
            _subject("s2", _chapter("c2", True, True, False, False, False, False)),
        ]

        progress = overall_progress(subjects)

        assert progress.total == 8
        assert progress.completed == 3
        assert progress.percentage == 37.5


class TestNextSubTopic:
    def test_first_uncompleted_in_order(self):
        """Next-up walks subjects, chapters and sub-topics in insertion order."""
        subjects = [
            _subject("s1", _chapter("c1", True, True)),
            _subject("s2", _chapter("c2", True), _chapter("c3", True, False, False)),
        ]

        next_up = next_sub_topic(subjects)

        assert next_up.subject_id == "s2"
        assert next_up.chapter_id == "c3"
        assert next_up.sub_topic_id == "c3-t1"
        assert next_up.chapter_title == "Chapter c3"

    def test_all_completed(self):
        assert next_sub_topic([_subject("s1", _chapter("c1", True))]) is None

    def test_no_subjects(self):
        assert next_sub_topic([]) is None
