"""DOCX document generator for quiz export."""

import logging
from datetime import datetime
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor

from quiz_extractor.messages import difficulty_label
from quiz_extractor.models.quiz import Question, QuestionKind, Quiz
from quiz_extractor.parsing.letters import contains_arabic, index_to_letter

logger = logging.getLogger(__name__)

LABELS = {
    "en": {
        "questions": "Total Questions",
        "difficulty": "Difficulty",
        "time_limit": "Time Limit",
        "minutes": "min",
        "generated": "Generated",
        "answer_key": "Answer Key",
        "answer": "Answer",
        "explanation": "Explanation",
        "written_answer": "Answer",
    },
    "ar": {
        "questions": "عدد الأسئلة",
        "difficulty": "الصعوبة",
        "time_limit": "المدة",
        "minutes": "دقيقة",
        "generated": "تاريخ الإنشاء",
        "answer_key": "مفتاح الإجابات",
        "answer": "الإجابة",
        "explanation": "الشرح",
        "written_answer": "الإجابة",
    },
}

DIFFICULTY_COLORS = {
    "easy": RGBColor(0, 128, 0),
    "medium": RGBColor(255, 140, 0),
    "hard": RGBColor(255, 0, 0),
    "expert": RGBColor(128, 0, 128),
}


def is_arabic_quiz(quiz: Quiz) -> bool:
    """A quiz is laid out right-to-left when its title or first question is Arabic."""
    return contains_arabic(quiz.title) or contains_arabic(quiz.questions[0].text)


def ensure_output_directory(output_dir: str = "output") -> Path:
    """
    Ensure the output directory exists.

    Args:
        output_dir: Directory path to create

    Returns:
        Path object for the output directory
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def generate_timestamped_filename(base_name: str, extension: str = "docx") -> str:
    """
    Generate a filename with timestamp.

    Args:
        base_name: Base name for the file
        extension: File extension (without dot)

    Returns:
        Filename with timestamp
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    # Clean the base name to remove any path components
    base_name = Path(base_name).name
    return f"{base_name}_{timestamp}.{extension}"


def _align(paragraph, arabic: bool, centered: bool = False) -> None:
    if centered:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    elif arabic:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    if arabic:
        for run in paragraph.runs:
            run.font.rtl = True


def export_to_docx(
    quiz: Quiz,
    output_path: str,
    include_answers: bool = False,
    use_output_dir: bool = True,
    output_dir: str = "output",
) -> str:
    """
    Export quiz to a formatted DOCX file.

    Args:
        quiz: Quiz object to export
        output_path: Path where the DOCX file should be saved (can be relative or absolute)
        include_answers: If True, marks correct answers and adds an answer key
        use_output_dir: If True, saves to output directory with timestamp (default: True)
        output_dir: Directory to save files in (default: "output")

    Returns:
        Path to the created DOCX file
    """
    if use_output_dir:
        output_dir_path = ensure_output_directory(output_dir)
        output_path = str(output_dir_path / generate_timestamped_filename(Path(output_path).stem))

    arabic = is_arabic_quiz(quiz)
    labels = LABELS["ar" if arabic else "en"]

    doc = Document()
    setup_document_styles(doc)

    title = doc.add_heading(quiz.title, level=0)
    _align(title, arabic, centered=True)

    if quiz.description:
        desc_para = doc.add_paragraph(quiz.description)
        desc_para.runs[0].italic = True
        _align(desc_para, arabic, centered=True)

    doc.add_paragraph()
    info_para = doc.add_paragraph()
    info_para.add_run(f"{labels['questions']}: {len(quiz.questions)}").bold = True
    info_para.add_run("  |  ")
    difficulty = difficulty_label(quiz.difficulty.value, "ar" if arabic else "en")
    info_para.add_run(f"{labels['difficulty']}: {difficulty}").bold = True
    if quiz.time_limit_minutes:
        info_para.add_run("  |  ")
        info_para.add_run(
            f"{labels['time_limit']}: {quiz.time_limit_minutes} {labels['minutes']}"
        ).bold = True
    _align(info_para, arabic, centered=True)

    date_para = doc.add_paragraph(f"{labels['generated']}: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    date_para.runs[0].font.size = Pt(9)
    date_para.runs[0].font.color.rgb = RGBColor(128, 128, 128)
    _align(date_para, arabic, centered=True)

    doc.add_page_break()

    for number, question in enumerate(quiz.questions, 1):
        add_question_to_document(doc, number, question, include_answers, arabic)

    if include_answers:
        add_answer_key(doc, quiz)

    doc.save(output_path)
    logger.info("Exported quiz %r to %s", quiz.title, output_path)

    return output_path


def setup_document_styles(doc: Document) -> None:
    """
    Set up document-wide styles.

    Args:
        doc: Document to configure
    """
    style = doc.styles["Normal"]
    font = style.font
    font.name = "Calibri"
    font.size = Pt(11)

    for section in doc.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)


def add_question_to_document(
    doc: Document,
    number: int,
    question: Question,
    include_answers: bool = False,
    arabic: bool = False,
) -> None:
    """
    Add one question with its options (or answer space) to the document.

    Args:
        doc: Document to add to
        number: 1-based question number
        question: Question to render
        include_answers: If True, highlights the correct answer and explanation
        arabic: Use Arabic option letters and right-to-left layout
    """
    labels = LABELS["ar" if arabic else "en"]

    q_para = doc.add_paragraph()
    q_run = q_para.add_run(f"{number}. ")
    q_run.bold = True
    q_run.font.size = Pt(12)
    q_para.add_run(question.text)
    _align(q_para, arabic)

    if question.kind == QuestionKind.MULTIPLE_CHOICE:
        for index, option in enumerate(question.options):
            letter = index_to_letter(index, arabic=arabic)
            opt_para = doc.add_paragraph(f"   {letter}) {option}")
            opt_para.paragraph_format.left_indent = Inches(0.5)

            if include_answers and index == question.correct_index:
                opt_para.runs[0].bold = True
                opt_para.runs[0].font.color.rgb = RGBColor(0, 128, 0)
                opt_para.add_run(" ✓").font.color.rgb = RGBColor(0, 128, 0)
            _align(opt_para, arabic)
    elif include_answers:
        ans_para = doc.add_paragraph()
        ans_para.paragraph_format.left_indent = Inches(0.5)
        ans_run = ans_para.add_run(f"{labels['written_answer']}: {question.correct_option}")
        ans_run.font.color.rgb = RGBColor(0, 128, 0)
        _align(ans_para, arabic)
    else:
        lines_para = doc.add_paragraph("_" * 60)
        lines_para.paragraph_format.left_indent = Inches(0.5)
        _align(lines_para, arabic)

    if include_answers and question.explanation:
        exp_para = doc.add_paragraph()
        exp_para.paragraph_format.left_indent = Inches(0.5)
        exp_run = exp_para.add_run(f"{labels['explanation']}: {question.explanation}")
        exp_run.italic = True
        exp_run.font.size = Pt(10)
        exp_run.font.color.rgb = RGBColor(64, 64, 64)
        _align(exp_para, arabic)

    doc.add_paragraph()


def add_answer_key(doc: Document, quiz: Quiz) -> None:
    """
    Add an answer key section at the end of the document.

    Args:
        doc: Document to add to
        quiz: Quiz object
    """
    arabic = is_arabic_quiz(quiz)
    labels = LABELS["ar" if arabic else "en"]

    doc.add_page_break()

    header = doc.add_heading(labels["answer_key"], level=1)
    header.runs[0].font.color.rgb = RGBColor(0, 51, 102)
    _align(header, arabic, centered=True)

    doc.add_paragraph()

    table = doc.add_table(rows=1, cols=3)
    table.style = "Light Grid Accent 1"

    header_cells = table.rows[0].cells
    header_cells[0].text = "#"
    header_cells[1].text = labels["answer"]
    header_cells[2].text = labels["explanation"]

    for cell in header_cells:
        for paragraph in cell.paragraphs:
            for run in paragraph.runs:
                run.bold = True

    for number, question in enumerate(quiz.questions, 1):
        row_cells = table.add_row().cells
        row_cells[0].text = str(number)
        if question.kind == QuestionKind.MULTIPLE_CHOICE:
            letter = index_to_letter(question.correct_index, arabic=arabic)
            row_cells[1].text = f"{letter}) {question.correct_option}"
        else:
            row_cells[1].text = question.correct_option
        row_cells[2].text = question.explanation or "N/A"

    doc.add_paragraph()


def generate_answer_key(quiz: Quiz, output_path: str) -> str:
    """
    Generate a separate answer key document.

    Args:
        quiz: Quiz object
        output_path: Path where the answer key should be saved

    Returns:
        Path to the created answer key file
    """
    arabic = is_arabic_quiz(quiz)
    labels = LABELS["ar" if arabic else "en"]

    doc = Document()
    setup_document_styles(doc)

    title = doc.add_heading(f"{quiz.title} - {labels['answer_key']}", level=0)
    _align(title, arabic, centered=True)

    doc.add_paragraph()

    add_answer_key(doc, quiz)

    doc.save(output_path)

    return output_path


def export_quiz_with_separate_answers(
    quiz: Quiz, base_path: str, output_dir: str = "output"
) -> tuple[str, str]:
    """
    Export quiz with questions and answers in separate files.

    Args:
        quiz: Quiz object
        base_path: Base path for output files (without extension)
        output_dir: Directory to save files in (default: "output")

    Returns:
        Tuple of (questions_path, answers_path)
    """
    output_path = ensure_output_directory(output_dir)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base_name = Path(base_path).name

    questions_path = str(output_path / f"{base_name}_questions_{timestamp}.docx")
    answers_path = str(output_path / f"{base_name}_answers_{timestamp}.docx")

    # Paths are already final, so skip the output-dir handling
    export_to_docx(quiz, questions_path, include_answers=False, use_output_dir=False)
    generate_answer_key(quiz, answers_path)

    return questions_path, answers_path
