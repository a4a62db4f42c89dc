"""CLI commands for StudySync.

Study plan:
- subject / chapter / topic / ref: manage the study tree
- dashboard: overall progress and what to study next

Study tools:
- focus: pomodoro focus/break timer, marks a sub-topic done on completion
- summarize / breaks / quiz: AI study assistant

Ids accept a unique prefix (the first characters shown in listings).
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table

from studysync.ai.assistant import AIServiceError, LLMStudyAssistant, build_assistant
from studysync.config.app_config import load_app_config, resolve_state_dir
from studysync.core.models import (
    Chapter,
    ChapterUpdate,
    Priority,
    Reference,
    ReferenceType,
    ReferenceUpdate,
    Subject,
    SubjectUpdate,
    SubTopic,
    SubTopicUpdate,
)
from studysync.core.pomodoro import PomodoroTimer, SessionType
from studysync.core.progress import next_sub_topic, overall_progress, subject_progress
from studysync.core.quiz_session import QuizSession
from studysync.core.study_store import StudyDataStore, open_store
from studysync.llm.client import LLMError
from studysync.utils.validators import (
    DEFAULT_SUBJECT_COLOR,
    AmbiguousIdError,
    IdNotFoundError,
    resolve_id,
    validate_color,
    validate_title,
)

# Range accepted by the break scheduler command
MIN_BREAK_DURATION = 10
MAX_BREAK_DURATION = 360

app = typer.Typer(
    name="studysync",
    help="Personal study tracker with an AI study assistant.",
    no_args_is_help=True,
)
subject_app = typer.Typer(help="Manage subjects.", no_args_is_help=True)
chapter_app = typer.Typer(help="Manage chapters of a subject.", no_args_is_help=True)
topic_app = typer.Typer(help="Manage sub-topics of a chapter.", no_args_is_help=True)
ref_app = typer.Typer(help="Manage references (links and notes) of a chapter.", no_args_is_help=True)

app.add_typer(subject_app, name="subject")
app.add_typer(chapter_app, name="chapter")
app.add_typer(topic_app, name="topic")
app.add_typer(ref_app, name="ref")

console = Console()

# Patched in tests
_sleep = time.sleep


# =============================================================================
# HELPERS
# =============================================================================


def _fail(message: object) -> NoReturn:
    console.print(f"[red]✗ {message}[/red]")
    raise typer.Exit(code=1)


def _open_store() -> StudyDataStore:
    return open_store(resolve_state_dir())


def _short(entity_id: str) -> str:
    return entity_id[:8]


def _check_title(title: str) -> str:
    try:
        return validate_title(title)
    except ValueError as e:
        _fail(e)


def _resolve_subject(store: StudyDataStore, subject_ref: str) -> Subject:
    try:
        subject_id = resolve_id(subject_ref, [s.id for s in store.subjects], "subject")
    except (IdNotFoundError, AmbiguousIdError) as e:
        _fail(e)
    return store.get_subject(subject_id)


def _resolve_chapter(
    store: StudyDataStore, subject_ref: str, chapter_ref: str
) -> tuple[Subject, Chapter]:
    subject = _resolve_subject(store, subject_ref)
    try:
        chapter_id = resolve_id(chapter_ref, [c.id for c in subject.chapters], "chapter")
    except (IdNotFoundError, AmbiguousIdError) as e:
        _fail(e)
    return subject, subject.find_chapter(chapter_id)


def _resolve_sub_topic(
    store: StudyDataStore, subject_ref: str, chapter_ref: str, sub_topic_ref: str
) -> tuple[Subject, Chapter, SubTopic]:
    subject, chapter = _resolve_chapter(store, subject_ref, chapter_ref)
    try:
        sub_topic_id = resolve_id(
            sub_topic_ref, [st.id for st in chapter.sub_topics], "sub-topic"
        )
    except (IdNotFoundError, AmbiguousIdError) as e:
        _fail(e)
    return subject, chapter, chapter.find_sub_topic(sub_topic_id)


def _resolve_reference(
    store: StudyDataStore, subject_ref: str, chapter_ref: str, reference_ref: str
) -> tuple[Subject, Chapter, Reference]:
    subject, chapter = _resolve_chapter(store, subject_ref, chapter_ref)
    try:
        reference_id = resolve_id(
            reference_ref, [r.id for r in chapter.references], "reference"
        )
    except (IdNotFoundError, AmbiguousIdError) as e:
        _fail(e)
    return subject, chapter, chapter.find_reference(reference_id)


def _confirm_or_cancel(question: str, yes: bool) -> None:
    if yes:
        return
    if not typer.confirm(question):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(code=0)


PRIORITY_COLORS = {
    Priority.LOW: "dim",
    Priority.MEDIUM: "yellow",
    Priority.HIGH: "red",
}


# =============================================================================
# SUBJECTS
# =============================================================================


@subject_app.command("add")
def subject_add(
    title: str = typer.Argument(..., help="Subject title"),
    color: str = typer.Option(
        DEFAULT_SUBJECT_COLOR, "--color", "-c", help="Display color (hex from the palette)"
    ),
) -> None:
    """Add a new subject."""
    title = _check_title(title)
    try:
        color = validate_color(color)
    except ValueError as e:
        _fail(e)

    store = _open_store()
    subject = store.add_subject(title, color)

    console.print("[green]✓ Subject added[/green]")
    console.print(f"  [dim]id:[/dim]    {subject.id}")
    console.print(f"  [dim]title:[/dim] {subject.title}")
    console.print(f"  [dim]color:[/dim] [{subject.color}]■[/{subject.color}] {subject.color}")


@subject_app.command("list")
def subject_list() -> None:
    """List all subjects with their progress."""
    store = _open_store()

    if not store.subjects:
        console.print("[yellow]No subjects added yet[/yellow]")
        console.print("  Use: studysync subject add <title>")
        return

    table = Table(title=f"Subjects ({len(store.subjects)})")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Chapters", justify="right")
    table.add_column("Progress", justify="right")

    for subject in store.subjects:
        chapters = len(subject.chapters)
        table.add_row(
            _short(subject.id),
            f"[{subject.color}]■[/{subject.color}] {subject.title}",
            f"{chapters} {'chapter' if chapters == 1 else 'chapters'}",
            f"{subject_progress(subject):.0f}%",
        )

    console.print(table)


@subject_app.command("show")
def subject_show(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID", help="Subject id or prefix"),
) -> None:
    """Show a subject's chapters, sub-topics and references."""
    store = _open_store()
    subject = _resolve_subject(store, subject_ref)

    console.print(f"\n[bold][{subject.color}]■[/{subject.color}] {subject.title}[/bold]")
    console.print(f"[dim]id:[/dim] {subject.id}")
    console.print(f"[dim]Progress:[/dim] {subject_progress(subject):.0f}%")

    if not subject.chapters:
        console.print("\n[dim]No chapters yet.[/dim]")
        return

    for chapter in subject.chapters:
        console.print(f"\n[bold]{chapter.title}[/bold] [dim]({_short(chapter.id)})[/dim]")

        if chapter.sub_topics:
            console.print("  [blue]Sub-topics[/blue]")
            for st in chapter.sub_topics:
                mark = "[green]✓[/green]" if st.completed else "○"
                color = PRIORITY_COLORS[st.priority]
                console.print(
                    f"    {mark} {st.title} [{color}]{st.priority.value}[/{color}]"
                    f" [dim]({_short(st.id)})[/dim]"
                )
        else:
            console.print("  [dim]No sub-topics yet.[/dim]")

        if chapter.references:
            console.print("  [blue]References[/blue]")
            for ref in chapter.references:
                console.print(
                    f"    \\[{ref.type.value}] {ref.title}: {ref.content}"
                    f" [dim]({_short(ref.id)})[/dim]"
                )


@subject_app.command("rename")
def subject_rename(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    title: str = typer.Argument(..., help="New title"),
) -> None:
    """Rename a subject."""
    title = _check_title(title)
    store = _open_store()
    subject = _resolve_subject(store, subject_ref)
    store.update_subject(subject.id, SubjectUpdate(title=title))
    console.print(f"[green]✓ Subject renamed: {title}[/green]")


@subject_app.command("recolor")
def subject_recolor(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    color: str = typer.Argument(..., help="New color (hex from the palette)"),
) -> None:
    """Change a subject's display color."""
    try:
        color = validate_color(color)
    except ValueError as e:
        _fail(e)
    store = _open_store()
    subject = _resolve_subject(store, subject_ref)
    store.update_subject(subject.id, SubjectUpdate(color=color))
    console.print(f"[green]✓ Color updated: {color}[/green]")


@subject_app.command("delete")
def subject_delete(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Delete a subject with all its chapters."""
    store = _open_store()
    subject = _resolve_subject(store, subject_ref)

    _confirm_or_cancel(
        f"Delete '{subject.title}' and its {len(subject.chapters)} chapter(s)?", yes
    )
    store.delete_subject(subject.id)
    console.print(f"[green]✓ Subject deleted: {subject.title}[/green]")


# =============================================================================
# CHAPTERS
# =============================================================================


@chapter_app.command("add")
def chapter_add(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    title: str = typer.Argument(..., help="Chapter title"),
) -> None:
    """Add a chapter to a subject."""
    title = _check_title(title)
    store = _open_store()
    subject = _resolve_subject(store, subject_ref)
    chapter = store.add_chapter(subject.id, title)

    console.print(f"[green]✓ Chapter added to {subject.title}[/green]")
    console.print(f"  [dim]id:[/dim] {chapter.id}")


@chapter_app.command("rename")
def chapter_rename(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    title: str = typer.Argument(..., help="New title"),
) -> None:
    """Rename a chapter."""
    title = _check_title(title)
    store = _open_store()
    subject, chapter = _resolve_chapter(store, subject_ref, chapter_ref)
    store.update_chapter(subject.id, chapter.id, ChapterUpdate(title=title))
    console.print(f"[green]✓ Chapter renamed: {title}[/green]")


@chapter_app.command("delete")
def chapter_delete(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Delete a chapter with its sub-topics and references."""
    store = _open_store()
    subject, chapter = _resolve_chapter(store, subject_ref, chapter_ref)

    _confirm_or_cancel(
        f"Delete '{chapter.title}' ({len(chapter.sub_topics)} sub-topic(s), "
        f"{len(chapter.references)} reference(s))?",
        yes,
    )
    store.delete_chapter(subject.id, chapter.id)
    console.print(f"[green]✓ Chapter deleted: {chapter.title}[/green]")


# =============================================================================
# SUB-TOPICS
# =============================================================================


@topic_app.command("add")
def topic_add(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    title: str = typer.Argument(..., help="Sub-topic title"),
    priority: Priority = typer.Option(
        Priority.MEDIUM, "--priority", "-p", case_sensitive=False, help="low, medium or high"
    ),
) -> None:
    """Add a sub-topic to a chapter."""
    title = _check_title(title)
    store = _open_store()
    subject, chapter = _resolve_chapter(store, subject_ref, chapter_ref)
    sub_topic = store.add_sub_topic(subject.id, chapter.id, title, priority)

    console.print(f"[green]✓ Sub-topic added to {chapter.title}[/green]")
    console.print(f"  [dim]id:[/dim]       {sub_topic.id}")
    console.print(f"  [dim]priority:[/dim] {sub_topic.priority.value}")


def _set_completed(subject_ref: str, chapter_ref: str, sub_topic_ref: str, completed: bool) -> None:
    store = _open_store()
    subject, chapter, sub_topic = _resolve_sub_topic(
        store, subject_ref, chapter_ref, sub_topic_ref
    )
    store.update_sub_topic(
        subject.id, chapter.id, sub_topic.id, SubTopicUpdate(completed=completed)
    )

    updated = store.get_subject(subject.id)
    state = "completed" if completed else "not completed"
    console.print(f"[green]✓ {sub_topic.title}: {state}[/green]")
    console.print(f"  [dim]{subject.title} progress:[/dim] {subject_progress(updated):.0f}%")


@topic_app.command("done")
def topic_done(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    sub_topic_ref: str = typer.Argument(..., metavar="SUB_TOPIC_ID"),
) -> None:
    """Mark a sub-topic as completed."""
    _set_completed(subject_ref, chapter_ref, sub_topic_ref, True)


@topic_app.command("undo")
def topic_undo(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    sub_topic_ref: str = typer.Argument(..., metavar="SUB_TOPIC_ID"),
) -> None:
    """Mark a sub-topic as not completed."""
    _set_completed(subject_ref, chapter_ref, sub_topic_ref, False)


@topic_app.command("priority")
def topic_priority(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    sub_topic_ref: str = typer.Argument(..., metavar="SUB_TOPIC_ID"),
    priority: Priority = typer.Argument(..., case_sensitive=False, help="low, medium or high"),
) -> None:
    """Change a sub-topic's priority."""
    store = _open_store()
    subject, chapter, sub_topic = _resolve_sub_topic(
        store, subject_ref, chapter_ref, sub_topic_ref
    )
    store.update_sub_topic(subject.id, chapter.id, sub_topic.id, SubTopicUpdate(priority=priority))
    console.print(f"[green]✓ {sub_topic.title}: priority {priority.value}[/green]")


@topic_app.command("delete")
def topic_delete(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    sub_topic_ref: str = typer.Argument(..., metavar="SUB_TOPIC_ID"),
) -> None:
    """Delete a sub-topic."""
    store = _open_store()
    subject, chapter, sub_topic = _resolve_sub_topic(
        store, subject_ref, chapter_ref, sub_topic_ref
    )
    store.delete_sub_topic(subject.id, chapter.id, sub_topic.id)
    console.print(f"[green]✓ Sub-topic deleted: {sub_topic.title}[/green]")


# =============================================================================
# REFERENCES
# =============================================================================


@ref_app.command("add")
def ref_add(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    title: str = typer.Argument(..., help="Reference title"),
    content: str = typer.Argument(..., help="URL for links, text for notes"),
    ref_type: ReferenceType = typer.Option(
        ReferenceType.LINK, "--type", "-t", case_sensitive=False, help="link or note"
    ),
) -> None:
    """Attach a link or note to a chapter."""
    title = _check_title(title)
    if len(content.strip()) < 2:
        _fail("Content is required.")

    store = _open_store()
    subject, chapter = _resolve_chapter(store, subject_ref, chapter_ref)
    reference = store.add_reference(subject.id, chapter.id, title, ref_type, content.strip())

    console.print(f"[green]✓ Reference added to {chapter.title}[/green]")
    console.print(f"  [dim]id:[/dim]   {reference.id}")
    console.print(f"  [dim]type:[/dim] {reference.type.value}")


@ref_app.command("edit")
def ref_edit(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    reference_ref: str = typer.Argument(..., metavar="REFERENCE_ID"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    content: str | None = typer.Option(None, "--content", help="New URL or note text"),
) -> None:
    """Edit a reference's title and/or content."""
    if title is None and content is None:
        _fail("Nothing to change: pass --title and/or --content")
    if title is not None:
        title = _check_title(title)

    store = _open_store()
    subject, chapter, reference = _resolve_reference(
        store, subject_ref, chapter_ref, reference_ref
    )
    store.update_reference(
        subject.id, chapter.id, reference.id, ReferenceUpdate(title=title, content=content)
    )
    console.print(f"[green]✓ Reference updated: {title or reference.title}[/green]")


@ref_app.command("delete")
def ref_delete(
    subject_ref: str = typer.Argument(..., metavar="SUBJECT_ID"),
    chapter_ref: str = typer.Argument(..., metavar="CHAPTER_ID"),
    reference_ref: str = typer.Argument(..., metavar="REFERENCE_ID"),
) -> None:
    """Delete a reference."""
    store = _open_store()
    subject, chapter, reference = _resolve_reference(
        store, subject_ref, chapter_ref, reference_ref
    )
    store.delete_reference(subject.id, chapter.id, reference.id)
    console.print(f"[green]✓ Reference deleted: {reference.title}[/green]")


# =============================================================================
# DASHBOARD
# =============================================================================


@app.command()
def dashboard() -> None:
    """Show overall progress and what to study next."""
    store = _open_store()
    overall = overall_progress(store.subjects)

    console.print("\n[bold]Overall Progress[/bold]")
    console.print(
        f"  You've completed {overall.completed} of {overall.total} sub-topics "
        f"({overall.percentage:.0f}%)."
    )

    console.print("\n[bold]Next Up[/bold]")
    if not store.subjects:
        console.print("  [dim]No subjects added yet.[/dim]")
        console.print("  Start with: studysync subject add <title>")
        return

    next_up = next_sub_topic(store.subjects)
    if next_up is None:
        console.print("  [green]Congratulations! You've completed all your sub-topics.[/green]")
    else:
        console.print(f"  [dim]{next_up.subject_title} › {next_up.chapter_title}[/dim]")
        console.print(f"  [bold]{next_up.sub_topic_title}[/bold]")
        console.print(
            f"  [dim]focus:[/dim] studysync focus {_short(next_up.subject_id)} "
            f"{_short(next_up.chapter_id)} {_short(next_up.sub_topic_id)}"
        )

    console.print("\n[bold]Subjects[/bold]")
    for subject in store.subjects:
        console.print(
            f"  [{subject.color}]■[/{subject.color}] {subject.title}: "
            f"{subject_progress(subject):.0f}%"
        )


# =============================================================================
# FOCUS TIMER
# =============================================================================


def _run_session(timer: PomodoroTimer) -> None:
    """Drive one timer session in real time with a progress bar."""
    label = "Focus Session" if timer.session_type == SessionType.WORK else "Break Time"
    timer.toggle()

    with Progress(
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        total = timer.total_seconds
        task = progress.add_task(label, total=total)
        finished = False
        while not finished:
            _sleep(1)
            finished = timer.tick(1)
            progress.update(task, completed=total if finished else timer.elapsed_seconds)


@app.command()
def focus(
    subject_ref: str | None = typer.Argument(None, metavar="[SUBJECT_ID]"),
    chapter_ref: str | None = typer.Argument(None, metavar="[CHAPTER_ID]"),
    sub_topic_ref: str | None = typer.Argument(None, metavar="[SUB_TOPIC_ID]"),
    work: int | None = typer.Option(None, "--work", "-w", min=1, help="Focus minutes"),
    break_minutes: int | None = typer.Option(None, "--break", "-b", min=1, help="Break minutes"),
    skip_break: bool = typer.Option(False, "--skip-break", help="Stop after the focus session"),
) -> None:
    """Run a pomodoro focus session, optionally on a sub-topic.

    When the focus session completes, the sub-topic is marked as completed.

    Example:
        studysync focus 3f2a 9c1d 77ab --work 25 --break 5
    """
    refs = [subject_ref, chapter_ref, sub_topic_ref]
    if any(refs) and not all(refs):
        _fail("Pass SUBJECT_ID, CHAPTER_ID and SUB_TOPIC_ID together, or none")

    timer_config = load_app_config().timer
    work = work or timer_config.work_minutes
    break_minutes = break_minutes or timer_config.break_minutes

    target: tuple[str, str, str] | None = None
    if all(refs):
        subject, chapter, sub_topic = _resolve_sub_topic(
            _open_store(), subject_ref, chapter_ref, sub_topic_ref
        )
        target = (subject.id, chapter.id, sub_topic.id)
        console.print(f"[blue]Focusing on:[/blue] [bold]{sub_topic.title}[/bold]")

    def on_session_complete() -> None:
        if target is None:
            return
        # Reload so changes saved during the session are kept
        _open_store().update_sub_topic(*target, SubTopicUpdate(completed=True))

    timer = PomodoroTimer(work, break_minutes, on_session_complete=on_session_complete)

    console.print(f"[dim]{work} min focus, {break_minutes} min break. Ctrl+C to stop.[/dim]")

    try:
        _run_session(timer)
        console.print("[green]✓ Session complete![/green]")
        if target is not None:
            console.print("  Sub-topic marked as completed. Great job!")

        if not skip_break:
            console.print("[blue]Time for a short break to recharge.[/blue]")
            _run_session(timer)
            console.print("[green]✓ Break over. Ready for the next session.[/green]")
    except KeyboardInterrupt:
        console.print("\n[yellow]Timer stopped[/yellow]")
        raise typer.Exit(code=0)


# =============================================================================
# AI STUDY ASSISTANT
# =============================================================================


def _build_assistant(provider: str | None, model: str | None) -> LLMStudyAssistant:
    try:
        assistant = build_assistant(provider=provider, model=model)
    except LLMError as e:
        _fail(e)

    if not assistant.client.is_available():
        _fail(f"Could not reach the AI provider ({assistant.client.config.provider})")
    return assistant


@app.command()
def summarize(
    text: str | None = typer.Argument(None, help="Text to summarize"),
    file: Path | None = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Read the text from a file"
    ),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="LLM provider: googleai, openai, lmstudio"
    ),
    model: str | None = typer.Option(None, "-m", "--model", help="Model name (overrides config)"),
) -> None:
    """Summarize notes and generate flashcards."""
    if file is not None:
        text = file.read_text(encoding="utf-8")
    if not text:
        _fail("Provide TEXT or --file")

    assistant = _build_assistant(provider, model)
    console.print("[blue]Generating summary...[/blue]")

    try:
        result = assistant.summarize(text)
    except AIServiceError as e:
        _fail(e)

    console.print("\n[bold]Summary[/bold]")
    console.print(result.summary)
    console.print("\n[bold]Flashcards[/bold]")
    console.print(result.flashcards)
    console.print(f"\n[dim]{result.progress}[/dim]")


@app.command()
def breaks(
    minutes: int = typer.Argument(..., help="Study duration in minutes (10-360)"),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="LLM provider: googleai, openai, lmstudio"
    ),
    model: str | None = typer.Option(None, "-m", "--model", help="Model name (overrides config)"),
) -> None:
    """Suggest breaks for a study session."""
    if minutes < MIN_BREAK_DURATION:
        _fail(f"Study duration must be at least {MIN_BREAK_DURATION} minutes.")
    if minutes > MAX_BREAK_DURATION:
        _fail(f"Study duration cannot exceed {MAX_BREAK_DURATION} minutes.")

    assistant = _build_assistant(provider, model)

    try:
        schedule = assistant.schedule_breaks(minutes)
    except AIServiceError as e:
        _fail(e)

    console.print(f"\n[bold]Break plan for {minutes} minutes[/bold]")
    if not schedule.break_suggestions:
        console.print("  [dim]No breaks suggested for this session.[/dim]")
        return
    for i, suggestion in enumerate(schedule.break_suggestions, 1):
        console.print(f"  {i}. {suggestion}")


def _ask_option(options: list[str]) -> int:
    """Show options and loop until a valid index is entered."""
    n_options = len(options)
    for idx, opt in enumerate(options):
        console.print(f"  {idx}. {opt}")

    while True:
        raw = typer.prompt(f"Choose an option (0-{n_options - 1})")
        try:
            choice = int(raw.strip())
            if 0 <= choice < n_options:
                return choice
            console.print(f"[yellow]⚠ Must be 0-{n_options - 1}[/yellow]")
        except ValueError:
            console.print("[yellow]⚠ Enter a number[/yellow]")


@app.command()
def quiz(
    topic: str = typer.Argument(..., help="Quiz topic"),
    n: int = typer.Option(5, "-n", help="Number of questions (1-10)"),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="LLM provider: googleai, openai, lmstudio"
    ),
    model: str | None = typer.Option(None, "-m", "--model", help="Model name (overrides config)"),
) -> None:
    """Take an interactive practice quiz on a topic.

    Example:
        studysync quiz "Photosynthesis" -n 5
    """
    assistant = _build_assistant(provider, model)
    console.print(f"[blue]Generating {n} questions about {topic}...[/blue]")

    try:
        practice_quiz = assistant.generate_quiz(topic, n)
    except AIServiceError as e:
        _fail(e)

    session = QuizSession(practice_quiz)
    total = len(practice_quiz.questions)

    for i, question in enumerate(practice_quiz.questions):
        console.print(f"\n[blue]Question {i + 1}/{total}[/blue]")
        console.print(f"[bold]{question.question_text}[/bold]")
        session.answer(i, _ask_option(question.options))

    score = session.finish()
    console.print(
        f"\n[bold]You scored {score.score} out of {score.total} ({score.percentage:.0f}%)[/bold]"
    )

    for i, (question, result) in enumerate(zip(practice_quiz.questions, session.results), 1):
        mark = "[green]✓[/green]" if result.is_correct else "[red]✗[/red]"
        console.print(f"\n{mark} {i}. {question.question_text}")
        if not result.is_correct:
            console.print(f"  [dim]Your answer:[/dim] {question.options[result.selected_index]}")
        console.print(f"  [dim]Correct answer:[/dim] {question.correct_answer}")
        console.print(f"  [dim]{question.explanation}[/dim]")
