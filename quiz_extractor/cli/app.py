"""Typer CLI application for quiz generation and extraction."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.prompt import Confirm, Prompt
from rich.table import Table

from quiz_extractor import __version__
from quiz_extractor.client import CompletionClient
from quiz_extractor.config.logging import setup_logging
from quiz_extractor.config.settings import Settings, get_settings
from quiz_extractor.documents import extract_pdf_text, subject_from_filename
from quiz_extractor.errors import DocumentExtractionError, HistoryStoreError
from quiz_extractor.export.docx_generator import export_quiz_with_separate_answers, export_to_docx
from quiz_extractor.graph import compile_workflow, create_initial_state, generate_chat_title
from quiz_extractor.messages import UiLanguage, describe_error, get_message
from quiz_extractor.models.history import ChatMessage, ChatRecord, QuizRecord
from quiz_extractor.models.quiz import (
    Difficulty,
    ModelTier,
    QuestionKind,
    Quiz,
    QuizAttempt,
    QuizConfiguration,
    QuizLanguage,
    QuizResults,
    QuizType,
)
from quiz_extractor.parsing import extract_quiz, index_to_letter, letter_to_index
from quiz_extractor.parsing.letters import contains_arabic
from quiz_extractor.storage import HistoryStore, open_history

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="quiz-extractor",
    help="Generate quizzes with Claude and extract them from free-text responses",
    add_completion=False,
)
history_app = typer.Typer(help="Browse and manage saved chats and quizzes")
app.add_typer(history_app, name="history")

console = Console()


def create_completion_client(settings: Settings) -> CompletionClient:
    """Completion client used by the commands."""
    return CompletionClient(settings)


def create_history_store(settings: Settings) -> HistoryStore:
    """History store used by the commands."""
    return open_history(settings.history_path, limit=settings.history_limit)


def run_workflow(client: CompletionClient, settings: Settings, state: dict, description: str) -> dict:
    """Run the generation workflow behind a spinner with an elapsed-time column."""
    workflow = compile_workflow(client.ask, settings.source_text_limit)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        return workflow.invoke(state)


def save_record(store: HistoryStore, record) -> None:
    """Persist a history record; a failing store only produces a warning."""
    try:
        store.upsert(record)
    except HistoryStoreError as e:
        console.print(f"[yellow]Warning:[/yellow] {e}")


@app.command()
def generate(
    quiz_type: QuizType = typer.Option(
        QuizType.MULTIPLE_CHOICE,
        "--type",
        "-t",
        help="Quiz format",
        case_sensitive=False,
    ),
    difficulty: Difficulty = typer.Option(
        Difficulty.MEDIUM,
        "--difficulty",
        "-d",
        help="Overall difficulty level",
        case_sensitive=False,
    ),
    question_count: int = typer.Option(
        5,
        "--questions",
        "-q",
        help="Number of questions",
        min=1,
        max=50,
    ),
    time_limit: int = typer.Option(
        0,
        "--time-limit",
        help="Time limit in minutes (0 = one minute per question, at least 5)",
        min=0,
    ),
    subject: Optional[str] = typer.Option(
        None,
        "--subject",
        "-s",
        help="Quiz subject",
    ),
    instructions: Optional[str] = typer.Option(
        None,
        "--instructions",
        help="Additional requirements appended to the prompt",
    ),
    quiz_language: QuizLanguage = typer.Option(
        QuizLanguage.ENGLISH,
        "--language",
        "-l",
        help="Language of the questions and answers",
        case_sensitive=False,
    ),
    tier: ModelTier = typer.Option(
        ModelTier.FAST,
        "--tier",
        help="Model tier (fast or quality)",
        case_sensitive=False,
    ),
    pdf: Optional[Path] = typer.Option(
        None,
        "--pdf",
        help="Build the questions only from this PDF document",
        exists=True,
        dir_okay=False,
    ),
    docx: Optional[str] = typer.Option(
        None,
        "--docx",
        "-o",
        help="Export to DOCX with this base name (without extension)",
    ),
    separate_answers: bool = typer.Option(
        True,
        "--separate-answers/--include-answers",
        help="Generate separate answer key file vs include answers in quiz",
    ),
    ui_language: Optional[UiLanguage] = typer.Option(
        None,
        "--ui-language",
        help="Interface language for labels and messages",
        case_sensitive=False,
    ),
    save: bool = typer.Option(True, "--save/--no-save", help="Save the quiz to history"),
) -> None:
    """
    Generate a quiz from a configuration.

    Example:
        quiz-extractor generate -t mixed -d hard -q 8 -s "World History"
    """
    settings = get_settings()
    ui_language = ui_language or settings.ui_language

    source_text = None
    if pdf is not None:
        try:
            with console.status("[cyan]Reading PDF...[/cyan]"):
                source_text = asyncio.run(extract_pdf_text(pdf, settings.pdf_batch_size))
        except DocumentExtractionError as e:
            console.print(f"[red]Error:[/red] {describe_error(e, ui_language)}")
            raise typer.Exit(code=1)
        if not source_text:
            console.print(f"[red]Error:[/red] No text found in {pdf.name}")
            raise typer.Exit(code=1)
        subject = subject or subject_from_filename(pdf)

    config = QuizConfiguration(
        type=quiz_type,
        difficulty=difficulty,
        question_count=question_count,
        time_limit_minutes=time_limit,
        subject=subject,
        custom_instructions=instructions,
        quiz_language=quiz_language,
        source_text=source_text,
        model_tier=tier,
    )
    display_config(config, pdf)

    client = create_completion_client(settings)
    state = create_initial_state(config=config, ui_language=ui_language)
    final_state = run_workflow(client, settings, state, "[cyan]Generating quiz...")

    if final_state["status"] != "quiz":
        console.print(f"\n[red]Error:[/red] {final_state['message']}", style="bold")
        raise typer.Exit(code=1)

    quiz = final_state["quiz"]
    console.print(f"\n[green]✓[/green] {final_state['message']}")
    display_quiz_summary(quiz)
    display_questions(quiz)

    if save:
        record = QuizRecord(title=quiz.title, quiz=quiz)
        save_record(create_history_store(settings), record)
        console.print(f"\nSaved as [cyan]{record.id}[/cyan]")

    if docx:
        export_quiz(quiz, docx, separate_answers)


@app.command()
def chat(
    message: str = typer.Argument(..., help="Message to send"),
    tier: ModelTier = typer.Option(
        ModelTier.FAST,
        "--tier",
        help="Model tier (fast or quality)",
        case_sensitive=False,
    ),
    ui_language: Optional[UiLanguage] = typer.Option(
        None,
        "--ui-language",
        help="Interface language for labels and messages",
        case_sensitive=False,
    ),
    save: bool = typer.Option(True, "--save/--no-save", help="Save the chat to history"),
) -> None:
    """
    Send a free prompt; quizzes in the response are detected and extracted.

    Example:
        quiz-extractor chat "Give me a 3 question quiz about volcanoes"
    """
    settings = get_settings()
    ui_language = ui_language or settings.ui_language

    client = create_completion_client(settings)
    state = create_initial_state(user_input=message, ui_language=ui_language, model_tier=tier)
    final_state = run_workflow(client, settings, state, "[cyan]Thinking...")

    if final_state["status"] == "error":
        console.print(f"[red]Error:[/red] {final_state['message']}", style="bold")
        raise typer.Exit(code=1)

    quiz = final_state["quiz"]
    if quiz is not None:
        console.print(f"[green]✓[/green] {final_state['message']}")
        display_quiz_summary(quiz)
        display_questions(quiz)
    else:
        console.print(Markdown(final_state["response"] or ""))

    if not save:
        return

    store = create_history_store(settings)
    title = generate_chat_title(client.ask, message, ui_language)
    reply = final_state["message"] if quiz is not None else final_state["response"]
    save_record(
        store,
        ChatRecord(
            title=title,
            messages=[
                ChatMessage(role="user", text=message),
                ChatMessage(role="assistant", text=reply or ""),
            ],
        ),
    )
    if quiz is not None:
        record = QuizRecord(title=quiz.title, quiz=quiz)
        save_record(store, record)
        console.print(f"\nQuiz saved as [cyan]{record.id}[/cyan]")


@app.command()
def parse(
    file: Optional[Path] = typer.Argument(
        None,
        help="Text file holding a model response (reads stdin when omitted)",
        exists=True,
        dir_okay=False,
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the quiz as JSON"),
    ui_language: Optional[UiLanguage] = typer.Option(
        None,
        "--ui-language",
        help="Interface language for default labels",
        case_sensitive=False,
    ),
) -> None:
    """Extract a quiz from an existing response text."""
    settings = get_settings()
    ui_language = ui_language or settings.ui_language

    if file is not None:
        text = file.read_text(encoding="utf-8")
    else:
        text = typer.get_text_stream("stdin").read()

    quiz = extract_quiz(text, ui_language=ui_language)
    if quiz is None:
        console.print(f"[red]Error:[/red] {get_message('parse_failure', ui_language)}")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(quiz.model_dump_json(indent=2))
        return

    display_quiz_summary(quiz)
    display_questions(quiz, show_answers=True)


@app.command()
def take(record_id: str = typer.Argument(..., help="Id of a saved quiz")) -> None:
    """Take a saved quiz in the terminal and record the results."""
    settings = get_settings()
    store = create_history_store(settings)
    record = store.get(record_id)
    if not isinstance(record, QuizRecord):
        console.print(f"[red]Error:[/red] No saved quiz with id {record_id}")
        raise typer.Exit(code=1)

    quiz = record.quiz
    arabic = contains_arabic(quiz.title) or contains_arabic(quiz.questions[0].text)
    console.print(Panel(f"{quiz.title}\n{quiz.description}", border_style="cyan"))
    if quiz.time_limit_minutes:
        console.print(f"Time limit: {quiz.time_limit_minutes} min\n")

    attempt = QuizAttempt()
    started = time.monotonic()
    for index, question in enumerate(quiz.questions):
        console.print(f"\n[bold]{index + 1}. {question.text}[/bold]")
        if question.kind == QuestionKind.MULTIPLE_CHOICE:
            letters = [index_to_letter(i, arabic=arabic) for i in range(len(question.options))]
            for letter, option in zip(letters, question.options):
                console.print(f"   {letter}) {option}")
            choice = Prompt.ask("Your answer", choices=letters, console=console)
            attempt.record(index, letter_to_index(choice))
        else:
            answer = Prompt.ask("Your answer", console=console)
            console.print(f"[dim]Reference answer:[/dim] {question.correct_option}")
            matches = Confirm.ask("Does your answer match the reference?", console=console)
            attempt.record(index, 0 if matches else answer)

    attempt.elapsed_seconds = round(time.monotonic() - started, 1)
    results = attempt.to_results(quiz)
    try:
        store.attach_results(record.id, results)
    except HistoryStoreError as e:
        console.print(f"[yellow]Warning:[/yellow] {e}")
    display_results(results)


@app.command("export")
def export_command(
    record_id: str = typer.Argument(..., help="Id of a saved quiz"),
    output: str = typer.Option("quiz", "--output", "-o", help="Output base name (without extension)"),
    separate_answers: bool = typer.Option(
        True,
        "--separate-answers/--include-answers",
        help="Generate separate answer key file vs include answers in quiz",
    ),
) -> None:
    """Export a saved quiz to DOCX."""
    record = create_history_store(get_settings()).get(record_id)
    if not isinstance(record, QuizRecord):
        console.print(f"[red]Error:[/red] No saved quiz with id {record_id}")
        raise typer.Exit(code=1)
    export_quiz(record.quiz, output, separate_answers)


@history_app.command("list")
def history_list(
    kind: Optional[str] = typer.Option(None, "--kind", "-k", help="Only 'chat' or 'quiz' records"),
    search: Optional[str] = typer.Option(None, "--search", help="Filter by title"),
) -> None:
    """List saved chats and quizzes, newest first."""
    if kind is not None and kind not in ("chat", "quiz"):
        console.print("[red]Error:[/red] --kind must be 'chat' or 'quiz'")
        raise typer.Exit(code=1)

    store = create_history_store(get_settings())
    records = store.search(search, kind) if search else store.list_records(kind)
    if not records:
        console.print("No history yet.")
        return

    table = Table(title="History", border_style="cyan")
    table.add_column("Id", style="cyan")
    table.add_column("Kind")
    table.add_column("Title", style="white")
    table.add_column("Date")
    table.add_column("Score")

    for record in records:
        score = ""
        if isinstance(record, QuizRecord) and record.results is not None:
            score = f"{record.results.score}/{record.results.total_questions}"
        table.add_row(record.id, record.kind, record.title, record.timestamp.strftime("%Y-%m-%d %H:%M"), score)

    console.print(table)


@history_app.command("show")
def history_show(record_id: str = typer.Argument(..., help="Record id")) -> None:
    """Show a saved chat transcript or quiz."""
    record = create_history_store(get_settings()).get(record_id)
    if record is None:
        console.print(f"[red]Error:[/red] No history record with id {record_id}")
        raise typer.Exit(code=1)

    if isinstance(record, ChatRecord):
        console.print(Panel(record.title, border_style="cyan"))
        for chat_message in record.messages:
            style = "bold cyan" if chat_message.role == "user" else "bold green"
            console.print(f"[{style}]{chat_message.role}:[/{style}] {chat_message.text}")
        return

    display_quiz_summary(record.quiz)
    display_questions(record.quiz, show_answers=True)
    if record.results is not None:
        display_results(record.results)


@history_app.command("delete")
def history_delete(
    record_id: str = typer.Argument(..., help="Record id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a saved chat or quiz."""
    if not yes and not Confirm.ask(f"Delete {record_id}?", console=console):
        raise typer.Exit()
    if not create_history_store(get_settings()).delete(record_id):
        console.print(f"[red]Error:[/red] No history record with id {record_id}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] Deleted {record_id}")


@app.command()
def info() -> None:
    """Display information about the quiz extractor."""
    settings = get_settings()
    info_text = f"""
[bold cyan]Quiz Extractor[/bold cyan]
Version: {__version__}

[bold]Pipeline:[/bold]
  • Prompt composer - configuration to instruction text
  • Completion client - Claude via LangChain
  • Quiz detector - bilingual keyword and structure check
  • Quiz extractor - JSON block fast path, line parser fallback

[bold]Features:[/bold]
  • English and Arabic quizzes
  • Multiple choice, text answer and mixed formats
  • Questions drawn from PDF documents
  • Chat and quiz history
  • DOCX export

[bold]Models:[/bold] {settings.fast_model_name} (fast), {settings.quality_model_name} (quality)
    """
    console.print(Panel(info_text, title="Quiz Extractor Info", border_style="cyan"))


def export_quiz(quiz: Quiz, output: str, separate_answers: bool) -> None:
    """Write the quiz to DOCX and report the file names."""
    console.print("\n[cyan]Exporting to DOCX...[/cyan]")
    try:
        if separate_answers:
            questions_file, answers_file = export_quiz_with_separate_answers(quiz, output)
            console.print("\n[green]✓[/green] Quiz exported successfully!")
            console.print(f"  Questions: {questions_file}")
            console.print(f"  Answers:   {answers_file}")
        else:
            output_file = export_to_docx(quiz, f"{output}.docx", include_answers=True)
            console.print(f"\n[green]✓[/green] Quiz exported to: {output_file}")
    except OSError as e:
        console.print(f"\n[red]Error during export:[/red] {e}", style="bold")
        raise typer.Exit(code=1)


def display_config(config: QuizConfiguration, pdf: Optional[Path] = None) -> None:
    """Display the configuration before generation."""
    table = Table(title="Quiz Configuration", show_header=False, border_style="cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Type", config.type.value)
    table.add_row("Difficulty", config.difficulty.value.capitalize())
    table.add_row("Questions", str(config.question_count))
    table.add_row("Language", config.quiz_language.value.capitalize())
    if config.subject:
        table.add_row("Subject", config.subject)
    if config.time_limit_minutes:
        table.add_row("Time limit", f"{config.time_limit_minutes} min")
    if pdf is not None:
        table.add_row("Document", pdf.name)
    table.add_row("Model tier", config.model_tier.value)

    console.print()
    console.print(table)


def display_quiz_summary(quiz: Quiz) -> None:
    """Display a summary of the quiz."""
    table = Table(title="Quiz Summary", border_style="green")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Title", quiz.title)
    table.add_row("Subject", quiz.subject)
    table.add_row("Difficulty", quiz.difficulty.value.capitalize())
    table.add_row("Questions", str(len(quiz.questions)))
    table.add_row("Multiple choice", str(len(quiz.get_questions_by_kind(QuestionKind.MULTIPLE_CHOICE))))
    table.add_row("Text answer", str(len(quiz.get_questions_by_kind(QuestionKind.TEXT_ANSWER))))
    table.add_row("Time limit", f"{quiz.time_limit_minutes} min")

    console.print()
    console.print(table)


def display_questions(quiz: Quiz, show_answers: bool = False) -> None:
    """Print the questions, optionally marking the correct answers."""
    arabic = contains_arabic(quiz.title) or contains_arabic(quiz.questions[0].text)
    for number, question in enumerate(quiz.questions, 1):
        console.print(f"\n[bold]{number}. {question.text}[/bold]")
        if question.kind == QuestionKind.MULTIPLE_CHOICE:
            for index, option in enumerate(question.options):
                letter = index_to_letter(index, arabic=arabic)
                if show_answers and index == question.correct_index:
                    console.print(f"   [green]{letter}) {option} ✓[/green]")
                else:
                    console.print(f"   {letter}) {option}")
        elif show_answers:
            console.print(f"   [green]{question.correct_option}[/green]")
        if show_answers and question.explanation:
            console.print(f"   [dim]{question.explanation}[/dim]")


def display_results(results: QuizResults) -> None:
    """Display the score of a completed attempt."""
    color = "green" if results.percentage >= 70 else "yellow" if results.percentage >= 60 else "red"
    console.print(
        Panel(
            f"Score: {results.score}/{results.total_questions} "
            f"([{color}]{results.percentage:.0f}%[/{color}])\n"
            f"Grade: {results.grade}\n"
            f"Time: {results.elapsed_seconds:.0f}s",
            title="Results",
            border_style=color,
        )
    )


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Quiz Extractor - generate quizzes with Claude and recover them from free text.
    """
    setup_logging("DEBUG" if verbose else get_settings().log_level)


if __name__ == "__main__":
    app()
