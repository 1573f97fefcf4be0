from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from classplan.conflicts import ConflictResult, evaluate_all
from classplan.model import (
    CLOSE_HOUR,
    EDITABLE_DAYS,
    IN_PROGRESS,
    OPEN_HOUR,
    EnrolledCourse,
    ValidationError,
    is_in_progress,
    normalize_status,
)
from classplan.store import ScheduleBlockStore

console = Console()

InputFn = Callable[[str], str]


def _results(store: ScheduleBlockStore, courses: list[EnrolledCourse], exclude_course_id: Any) -> list[ConflictResult]:
    # Re-run after every mutation; nothing is cached
    return evaluate_all(store.blocks, courses, exclude_course_id)


def render_draft(store: ScheduleBlockStore, results: list[ConflictResult], out: Console) -> None:
    table = Table(title=f"Schedule ({len(store)} blocks)", box=box.SIMPLE)
    table.add_column("", width=1)
    table.add_column("#", justify="right")
    table.add_column("Day")
    table.add_column("Time")
    table.add_column("Room")
    table.add_column("Status")

    for i, (block, result) in enumerate(zip(store.blocks, results)):
        marker = "[bold cyan]>[/]" if i == store.active_index else ""
        status = f"[red]{escape(result.reason)}[/]" if result.conflict else "[green]OK[/]"
        table.add_row(
            marker,
            str(i + 1),
            block.day.value,
            f"{block.start_hour}:00-{block.end_hour}:00",
            escape(block.room) or "-",
            status,
        )
    out.print(table)


def _pick_number(input_fn: InputFn, out: Console, msg: str, low: int, high: int) -> Optional[int]:
    pick = input_fn(msg).strip()
    if not pick:
        return None
    try:
        n = int(pick) if pick.isdecimal() else None
    except ValueError:
        n = None
    if n is None:
        out.print("Not a number.")
        return None
    if not (low <= n <= high):
        out.print("Out of range.")
        return None
    return n


def _flow_remove(store: ScheduleBlockStore, input_fn: InputFn, out: Console) -> None:
    if len(store) <= 1:
        out.print("A scheduled course keeps at least one block.")
        return
    n = _pick_number(input_fn, out, f"Block to remove [1-{len(store)}]: ", 1, len(store))
    if n is not None:
        store.remove_block(n - 1)
        out.print(f"Removed block {n}.")


def _flow_select(store: ScheduleBlockStore, input_fn: InputFn, out: Console) -> None:
    n = _pick_number(input_fn, out, f"Block to edit [1-{len(store)}]: ", 1, len(store))
    if n is not None:
        store.set_active_index(n - 1)


def _flow_day(store: ScheduleBlockStore, input_fn: InputFn, out: Console) -> None:
    codes = " ".join(d.value for d in EDITABLE_DAYS)
    value = input_fn(f"Day ({codes}): ").strip()
    if value:
        store.update_field(store.active_index, "day", value)


def _flow_time(store: ScheduleBlockStore, input_fn: InputFn, out: Console) -> None:
    start = _pick_number(input_fn, out, f"Start hour [{OPEN_HOUR}-{CLOSE_HOUR - 1}]: ", OPEN_HOUR, CLOSE_HOUR - 1)
    if start is None:
        return
    end = _pick_number(input_fn, out, f"End hour [{start + 1}-{CLOSE_HOUR}]: ", start + 1, CLOSE_HOUR)
    if end is None:
        return
    store.pick_time(start, end)


def _flow_room(store: ScheduleBlockStore, input_fn: InputFn, out: Console) -> None:
    store.update_field(store.active_index, "room", input_fn("Room [blank = none]: "))


def run_editor(
    store: ScheduleBlockStore,
    other_courses: Iterable[EnrolledCourse],
    exclude_course_id: Any = None,
    status: str = IN_PROGRESS,
    input_fn: Optional[InputFn] = None,
    out: Optional[Console] = None,
) -> Optional[Any]:
    """
    Interactive menu loop over one draft.

    Returns the save payload once the draft is conflict free and the user
    saves, or None if the user discards it.
    """
    out = out or console
    input_fn = input_fn or out.input
    courses = list(other_courses)

    if not is_in_progress(normalize_status(status)):
        out.print(f"Status {status!r}: course is not scheduled.")
        return store.to_payload(status)

    actions: dict[str, Callable[[ScheduleBlockStore, InputFn, Console], None]] = {
        "2": _flow_remove,
        "3": _flow_select,
        "4": _flow_day,
        "5": _flow_time,
        "6": _flow_room,
    }

    while True:
        results = _results(store, courses, exclude_course_id)
        render_draft(store, results, out)

        choice = input_fn(
            "\n[1] Add block\n"
            "[2] Remove block\n"
            "[3] Select block to edit\n"
            "[4] Set day\n"
            "[5] Set time\n"
            "[6] Set room\n"
            "[7] Save\n"
            "[0] Discard\n"
            "Select: "
        ).strip()

        if choice == "0":
            out.print("Discarded.")
            return None

        if choice == "1":
            if not store.add_block():
                out.print(f"At most {store.max_blocks} blocks per course.")
        elif choice == "7":
            # Evaluate once more right before saving
            results = _results(store, courses, exclude_course_id)
            conflicts = [(i, r) for i, r in enumerate(results) if r.conflict]
            if not conflicts:
                out.print("[green]Saved.[/]")
                return store.to_payload(status)
            out.print("[red]Cannot save, conflicts:[/]")
            for i, r in conflicts:
                out.print(f"  Block {i + 1}: {escape(r.reason)}")
        elif choice in actions:
            try:
                actions[choice](store, input_fn, out)
            except ValidationError as exc:
                out.print(f"[red]{escape(str(exc))}[/]")
        else:
            out.print("Invalid choice.")
