"""Tests for the extraction entry point."""

import json

import pytest

from quiz_extractor.models.quiz import QuestionKind, QuizType
from quiz_extractor.parsing import extract_quiz
from quiz_extractor.prompts import worked_example


class TestExtractQuiz:
    """Test the detector gate and strategy order."""

    def test_detector_miss_returns_none(self):
        """Test that text the detector rejects is never parsed."""
        assert extract_quiz("Sure! Paris is lovely in spring.") is None

    def test_prefers_json_block(self):
        """Test that a valid JSON block wins over the line parser."""
        payload = {
            "title": "From JSON",
            "questions": [{"question": "Pick?", "options": ["x", "y"], "correctAnswer": 1}],
        }
        text = (
            "Quiz time!\n```json\n" + json.dumps(payload) + "\n```\n"
            "1. Other?\na) p\nb) q\nCorrect Answer: a)"
        )
        quiz = extract_quiz(text)

        assert quiz.title == "From JSON"
        assert quiz.questions[0].text == "Pick?"

    def test_falls_back_to_lines_when_block_is_broken(self):
        """Test that a malformed block falls through to the line parser."""
        text = "Quiz:\n```json\n{not json}\n```\n1. Other?\na) p\nb) q\nCorrect Answer: a)"
        quiz = extract_quiz(text)

        assert quiz is not None
        assert quiz.questions[0].text == "Other?"

    def test_detected_but_unparseable(self):
        """Test that a detected quiz without complete questions yields None."""
        assert extract_quiz("Here is a quiz:\n1. What is the meaning of life?") is None

    def test_idempotent(self, multiple_choice_response: str):
        """Test that parsing the same text twice gives equal quizzes."""
        assert extract_quiz(multiple_choice_response) == extract_quiz(multiple_choice_response)

    def test_imperative_prompts_need_a_quiz_signal(self):
        """Test that bare imperative prompts pass the gate only with a quiz keyword."""
        body = "1. Explain gravity.\nAnswer: Gravity attracts masses."

        assert extract_quiz(body) is None

        quiz = extract_quiz("Quiz:\n" + body)
        assert quiz is not None
        assert quiz.questions[0].kind == QuestionKind.TEXT_ANSWER
        assert quiz.questions[0].options == ["Gravity attracts masses."]


class TestWorkedExamplesRoundTrip:
    """The prompt examples must parse back to what they show."""

    @pytest.mark.parametrize(
        "quiz_type,kinds,indices",
        [
            (QuizType.MULTIPLE_CHOICE, [QuestionKind.MULTIPLE_CHOICE] * 2, [2, 1]),
            (QuizType.TEXT_ANSWER, [QuestionKind.TEXT_ANSWER] * 2, [0, 0]),
            (
                QuizType.MIXED,
                [QuestionKind.MULTIPLE_CHOICE, QuestionKind.TEXT_ANSWER, QuestionKind.MULTIPLE_CHOICE],
                [2, 0, 1],
            ),
        ],
    )
    def test_round_trip(self, quiz_type: QuizType, kinds: list[QuestionKind], indices: list[int]):
        """Test question count, kinds, option counts and answer indices."""
        quiz = extract_quiz(worked_example(quiz_type))

        assert quiz is not None
        assert [q.kind for q in quiz.questions] == kinds
        assert [q.correct_index for q in quiz.questions] == indices
        for question in quiz.questions:
            expected = 4 if question.kind == QuestionKind.MULTIPLE_CHOICE else 1
            assert len(question.options) == expected

    def test_mixed_tags_are_stripped(self):
        """Test that the type tags in the mixed example are not part of the text."""
        quiz = extract_quiz(worked_example(QuizType.MIXED))

        assert quiz.questions[0].text == "What is the capital of France?"
        assert quiz.questions[1].text == "Explain the significance of the French Revolution in European history."
