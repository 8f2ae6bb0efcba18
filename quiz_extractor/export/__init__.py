"""Export functionality for quiz documents."""

from .docx_generator import export_quiz_with_separate_answers, export_to_docx, generate_answer_key

__all__ = ["export_quiz_with_separate_answers", "export_to_docx", "generate_answer_key"]
