"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from quiz_extractor.models.history import (
    ChatMessage,
    ChatRecord,
    QuizRecord,
    history_record_adapter,
)
from quiz_extractor.models.quiz import (
    Difficulty,
    ModelTier,
    Question,
    QuestionKind,
    Quiz,
    QuizAttempt,
    QuizConfiguration,
    QuizResults,
    QuizType,
    is_complete_question,
)


class TestIsCompleteQuestion:
    """Test the completeness predicate."""

    def test_text_answer_needs_one_option_at_zero(self):
        """Test that a text answer is complete with exactly one option and index 0."""
        assert is_complete_question(QuestionKind.TEXT_ANSWER, ["Gravity"], 0)
        assert not is_complete_question(QuestionKind.TEXT_ANSWER, ["A", "B"], 0)
        assert not is_complete_question(QuestionKind.TEXT_ANSWER, ["Gravity"], -1)

    def test_multiple_choice_needs_two_options_and_index_in_range(self):
        """Test that multiple choice needs >= 2 options and an index inside them."""
        assert is_complete_question(QuestionKind.MULTIPLE_CHOICE, ["3", "4"], 1)
        assert not is_complete_question(QuestionKind.MULTIPLE_CHOICE, ["3", "4"], 2)
        assert not is_complete_question(QuestionKind.MULTIPLE_CHOICE, ["3"], 0)
        assert not is_complete_question(QuestionKind.MULTIPLE_CHOICE, ["3", "4"], -1)

    def test_unknown_kind_is_judged_by_shape(self):
        """Test that a draft without a kind is judged by its options."""
        assert is_complete_question(None, ["only"], 0)
        assert is_complete_question(None, ["a", "b", "c"], 2)
        assert not is_complete_question(None, ["a", "b"], 3)
        assert not is_complete_question(None, [], -1)


class TestQuestion:
    """Test Question model."""

    def test_create_valid_question(self, sample_question: Question):
        """Test creating a valid question."""
        assert sample_question.text == "What is the capital of France?"
        assert sample_question.correct_index == 1
        assert sample_question.correct_option == "Paris"
        assert sample_question.kind == QuestionKind.MULTIPLE_CHOICE

    def test_question_rejects_out_of_range_index(self):
        """Test that correct_index must address one of the options."""
        with pytest.raises(ValidationError):
            Question(text="Test?", options=["1", "2", "3", "4"], correct_index=4)

    def test_question_rejects_single_option_multiple_choice(self):
        """Test that multiple choice needs at least two options."""
        with pytest.raises(ValidationError):
            Question(text="Test?", options=["1"], correct_index=0)

    def test_text_answer_question(self):
        """Test that a text answer carries its reference answer as the only option."""
        question = Question(
            text="Explain gravity.",
            kind=QuestionKind.TEXT_ANSWER,
            options=["Gravity attracts masses."],
            correct_index=0,
        )
        assert question.correct_option == "Gravity attracts masses."

    def test_question_text_cannot_be_blank(self):
        """Test that blank question text is rejected."""
        with pytest.raises(ValidationError):
            Question(text="   ", options=["a", "b"], correct_index=0)

    def test_explanation_optional(self, sample_questions: list[Question]):
        """Test that explanation is optional."""
        assert sample_questions[1].explanation is None


class TestQuiz:
    """Test Quiz model."""

    def test_create_valid_quiz(self, sample_quiz: Quiz):
        """Test creating a valid quiz."""
        assert sample_quiz.title == "Test Quiz"
        assert len(sample_quiz.questions) == 3

    def test_max_score_is_question_count(self, sample_quiz: Quiz):
        """Test that max_score is exposed and equals the question count."""
        assert sample_quiz.max_score == 3
        assert sample_quiz.model_dump()["max_score"] == 3

    def test_quiz_requires_questions(self):
        """Test that a quiz needs at least one question."""
        with pytest.raises(ValidationError):
            Quiz(title="Empty", subject="x", category="y", questions=[])

    def test_get_questions_by_kind(self, sample_quiz: Quiz):
        """Test filtering questions by kind."""
        assert len(sample_quiz.get_questions_by_kind(QuestionKind.MULTIPLE_CHOICE)) == 2
        assert len(sample_quiz.get_questions_by_kind(QuestionKind.TEXT_ANSWER)) == 1


class TestQuizConfiguration:
    """Test QuizConfiguration model."""

    def test_defaults(self):
        """Test the default configuration."""
        config = QuizConfiguration()

        assert config.type == QuizType.MULTIPLE_CHOICE
        assert config.difficulty == Difficulty.MEDIUM
        assert config.question_count == 5
        assert config.time_limit_minutes == 0
        assert config.model_tier == ModelTier.FAST

    def test_blank_subject_becomes_none(self):
        """Test that blank optional text is normalised to None."""
        config = QuizConfiguration(subject="   ", custom_instructions="")

        assert config.subject is None
        assert config.custom_instructions is None

    def test_question_count_must_be_positive(self):
        """Test that question_count must be at least 1."""
        with pytest.raises(ValidationError):
            QuizConfiguration(question_count=0)

    def test_configuration_is_frozen(self, sample_config: QuizConfiguration):
        """Test that a submitted configuration cannot be changed."""
        with pytest.raises(ValidationError):
            sample_config.question_count = 10


class TestQuizAttempt:
    """Test scoring of attempts."""

    def test_scores_matching_indices(self, sample_quiz: Quiz):
        """Test that only answers equal to the correct index score."""
        attempt = QuizAttempt()
        attempt.record(0, 1)
        attempt.record(1, 0)
        attempt.record(2, 0)

        assert attempt.score(sample_quiz) == 2

    def test_text_answer_only_scores_as_index_zero(self, sample_quiz: Quiz):
        """Test that a stored free-text answer does not score."""
        attempt = QuizAttempt(answers={2: "Because of scattering"})

        assert attempt.score(sample_quiz) == 0

    def test_to_results(self, sample_quiz: Quiz):
        """Test the results snapshot."""
        attempt = QuizAttempt(answers={0: 1, 1: 1, 2: 0}, elapsed_seconds=42.0)
        results = attempt.to_results(sample_quiz)

        assert results.score == 3
        assert results.total_questions == 3
        assert results.percentage == 100
        assert results.grade == "A+"


class TestQuizResults:
    """Test grade calculation."""

    @pytest.mark.parametrize(
        "score,grade",
        [(10, "A+"), (9, "A+"), (8, "A"), (7, "B"), (6, "C"), (5, "F"), (0, "F")],
    )
    def test_grades(self, score: int, grade: str):
        """Test grade boundaries."""
        assert QuizResults(score=score, total_questions=10).grade == grade


class TestHistoryRecords:
    """Test the history record union."""

    def test_discriminates_on_kind(self, sample_quiz: Quiz):
        """Test that records validate into the right class by kind."""
        quiz_record = QuizRecord(title="Quiz", quiz=sample_quiz)
        chat_record = ChatRecord(title="Chat", messages=[ChatMessage(role="user", text="hi")])

        dumped_quiz = history_record_adapter.dump_python(quiz_record, mode="json")
        dumped_chat = history_record_adapter.dump_python(chat_record, mode="json")

        assert isinstance(history_record_adapter.validate_python(dumped_quiz), QuizRecord)
        assert isinstance(history_record_adapter.validate_python(dumped_chat), ChatRecord)

    def test_ids_are_prefixed(self, sample_quiz: Quiz):
        """Test that generated ids carry their kind prefix."""
        assert QuizRecord(title="Quiz", quiz=sample_quiz).id.startswith("quiz_")
        assert ChatRecord(title="Chat").id.startswith("chat_")

    def test_unknown_kind_rejected(self):
        """Test that an unknown kind does not validate."""
        with pytest.raises(ValidationError):
            history_record_adapter.validate_python({"kind": "note", "title": "x"})
