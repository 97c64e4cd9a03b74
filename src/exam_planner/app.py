"""Interactive CLI for previewing generated study plans."""
import json
import uuid
from datetime import date, timedelta
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from exam_planner import config
from exam_planner.agenda import (
    group_by_date, date_summary, tasks_for_date, group_by_subject,
    topic_progress, minutes_by_task_type, rows_in_window,
    TASK_STATUSES, TaskUpdateError, mark_status, record_actual,
)
from exam_planner.curriculum import CurriculumError, load_curriculum
from exam_planner.logging_config import configure_logging
from exam_planner.models import SUBJECT_LABELS
from exam_planner.plan_setup import PlanInputError, create_plan

console = Console()

SCHEDULE_DAYS_BEFORE = 7
SCHEDULE_DAYS_AFTER = 30


def show_welcome():
    console.print(Panel(
        "[bold]Bookkeeping Certification[/bold]\n[dim]Study Plan Generator[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("plan", "Create a new study plan"),
        ("today", "Tasks for one day"),
        ("schedule", "Day-by-day overview"),
        ("log", "Mark a task done and log time"),
        ("topics", "Progress per topic"),
        ("export", "Save plan tasks as JSON"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def prompt_plan_form() -> dict:
    return {
        "start_date": Prompt.ask("Start date (YYYY-MM-DD)", default=date.today().isoformat()),
        "exam_date": Prompt.ask("Exam date (YYYY-MM-DD)"),
        "daily_minutes": IntPrompt.ask("Study minutes per day", default=config.DEFAULT_DAILY_MINUTES),
        "rest_days_per_week": IntPrompt.ask(
            "Rest days per week (0=none, 1=Sun, 2=Sun+Wed)",
            choices=["0", "1", "2"], default=config.DEFAULT_REST_DAYS,
        ),
    }


def show_plan_summary(rows: list[dict]) -> None:
    by_date = group_by_date(rows)
    total_minutes = sum(r["planned_minutes"] for r in rows)
    lines = [
        f"Tasks: [bold]{len(rows)}[/bold]  |  Days: [bold]{len(by_date)}[/bold]  |  "
        f"Planned: [bold]{total_minutes // 60}h {total_minutes % 60:02d}m[/bold]",
    ]
    if by_date:
        dates = list(by_date)
        lines.append(f"[dim]{dates[0]} → {dates[-1]}[/dim]")
    for task_type, minutes in sorted(minutes_by_task_type(rows).items()):
        lines.append(f"  [cyan]{task_type:<14}[/cyan] {minutes} min")
    console.print(Panel("\n".join(lines), title="Plan Summary", border_style="green"))


def show_day(rows: list[dict], day: str) -> None:
    day_rows = tasks_for_date(rows, day)
    if not day_rows:
        console.print(f"[yellow]No tasks on {day}.[/yellow]")
        return
    positions = {id(r): i for i, r in enumerate(rows)}
    summary = date_summary(day_rows)
    console.print(Panel(
        f"Done {summary['done']}/{summary['total']}  ·  Planned {summary['minutes']} min",
        title=f"Tasks for {day}",
    ))
    for subject, subject_rows in group_by_subject(day_rows):
        table = Table(title=f"{SUBJECT_LABELS[subject]} ({len(subject_rows)})")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Task")
        table.add_column("Minutes", justify="right")
        table.add_column("Status")
        for r in subject_rows:
            title = f"[strike]{r['title']}[/strike]" if r["status"] == "done" else r["title"]
            table.add_row(str(positions[id(r)]), title, str(r["planned_minutes"]), r["status"])
        console.print(table)


def show_schedule(rows: list[dict]) -> None:
    table = Table(title="Study Schedule")
    table.add_column("Date")
    table.add_column("Done", justify="right")
    table.add_column("Minutes", justify="right")
    table.add_column("Tasks")
    for day, day_rows in group_by_date(rows).items():
        summary = date_summary(day_rows)
        table.add_row(
            day,
            f"{summary['done']}/{summary['total']}",
            str(summary["minutes"]),
            "\n".join(r["title"] for r in day_rows),
        )
    console.print(table)


def show_topics(topics: list, rows: list[dict]) -> None:
    table = Table(title="Topic Progress")
    table.add_column("Subject", style="cyan")
    table.add_column("Topic")
    table.add_column("Progress", justify="right")
    table.add_column("Problem book", justify="right")
    for p in topic_progress(topics, rows):
        table.add_row(
            SUBJECT_LABELS[p["subject"]],
            f"{p['code']} {p['title']}",
            f"{p['done']}/{p['total']} ({p['ratio']}%)",
            f"p{p['problem_page_start']}+" if p["problem_page_start"] else "-",
        )
    console.print(table)


def export_rows(rows: list[dict], file_path: str) -> Path:
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def cmd_plan(state: dict):
    form = prompt_plan_form()
    rows = create_plan(state["topics"], form, plan_id=str(uuid.uuid4()))
    state["rows"] = rows
    show_plan_summary(rows)


def cmd_today(state: dict):
    day = Prompt.ask("Date (YYYY-MM-DD)", default=date.today().isoformat())
    show_day(state["rows"], day)


def cmd_schedule(state: dict):
    today = date.today()
    start = Prompt.ask("From (YYYY-MM-DD)", default=(today - timedelta(days=SCHEDULE_DAYS_BEFORE)).isoformat())
    end = Prompt.ask("To (YYYY-MM-DD)", default=(today + timedelta(days=SCHEDULE_DAYS_AFTER)).isoformat())
    rows = rows_in_window(state["rows"], start, end)
    if not rows:
        console.print(f"[yellow]No tasks between {start} and {end}.[/yellow]")
        return
    show_schedule(rows)


def _parse_actual_minutes(value: str) -> int | None:
    value = value.strip()
    if not value:
        return None
    if not value.isdigit():
        raise TaskUpdateError("Actual minutes must be a whole number.")
    return int(value)


def cmd_log(state: dict):
    rows = state["rows"]
    day = Prompt.ask("Date (YYYY-MM-DD)", default=date.today().isoformat())
    show_day(rows, day)
    if not tasks_for_date(rows, day):
        return
    index = IntPrompt.ask("Task #")
    status = Prompt.ask("Status", choices=list(TASK_STATUSES), default="done")
    row = mark_status(rows, index, status)
    actual = _parse_actual_minutes(Prompt.ask("Actual minutes (blank to skip)", default=""))
    note = Prompt.ask("Note (blank to skip)", default="")
    if actual is not None or note.strip():
        record_actual(rows, index, actual, note)
    console.print(f"[green]{row['title']} → {status}[/green]")


def cmd_topics(state: dict):
    show_topics(state["topics"], state["rows"])


def cmd_export(state: dict):
    file_path = Prompt.ask("Output file", default="study_plan.json")
    path = export_rows(state["rows"], file_path)
    console.print(f"[green]Saved {len(state['rows'])} tasks → {path}[/green]")


COMMANDS = {
    "plan": cmd_plan,
    "today": cmd_today,
    "schedule": cmd_schedule,
    "log": cmd_log,
    "topics": cmd_topics,
    "export": cmd_export,
}


def main():
    configure_logging()
    try:
        topics = load_curriculum(config.CURRICULUM_PATH)
    except (OSError, CurriculumError) as e:
        console.print(f"[red]Could not load curriculum: {e}[/red]")
        raise SystemExit(1)
    state = {"topics": topics, "rows": []}

    show_welcome()
    console.print(f"[dim]{len(topics)} topics loaded from {config.CURRICULUM_PATH}[/dim]")

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="plan" if not state["rows"] else "today")
        choice = choice.strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Good luck on your exam![/dim]")
            break
        command = COMMANDS.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        if choice != "plan" and not state["rows"]:
            console.print("[yellow]No plan yet. Use 'plan' to create one.[/yellow]")
            continue
        try:
            command(state)
        except (PlanInputError, TaskUpdateError) as e:
            console.print(f"[red]{e}[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
