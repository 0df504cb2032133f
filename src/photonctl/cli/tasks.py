from __future__ import annotations

from typing import Annotated, Any

import typer

from photonctl.cli import common
from photonctl.models import Task
from photonctl.utils.output import print_fields, print_lines, print_table
from photonctl.workflows import validate_task_id

app = typer.Typer(no_args_is_help=True, help="Task APIs")

TaskIdArg = Annotated[str, typer.Argument(help="Task id")]


def duration(task: Task) -> str:
    if not task.startedTime or not task.endTime or task.endTime < task.startedTime:
        return "-"
    seconds = (task.endTime - task.startedTime) // 1000
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


@app.command("list")
def task_list(
    ctx: typer.Context,
    entity_id: Annotated[str | None, typer.Option("--entityId", "-e", help="Only tasks on this entity")] = None,
    entity_kind: Annotated[
        str | None,
        typer.Option("--entityKind", "-k", help="Only tasks on this kind of entity"),
    ] = None,
    task_state: Annotated[str | None, typer.Option("--state", "-s", help="Only tasks in this state")] = None,
) -> None:
    state = common.get_state(ctx)

    async def run() -> Any:
        async with common.make_client(state) as client:
            return await client.tasks.list(entity_id=entity_id, entity_kind=entity_kind, state=task_state)

    tasks = common.run_async(run()).items
    if state.needs_formatting:
        common.emit_structured(tasks, state)
        return
    if state.non_interactive:
        print_lines([(task.id, task.state, task.operation, task.startedTime, duration(task)) for task in tasks])
        return
    print_table(
        ["Task", "Start Time", "Duration", "Operation", "State"],
        [
            (task.id, common.timestamp_to_string(task.startedTime), duration(task), task.operation, task.state)
            for task in tasks
        ],
    )


@app.command("show")
def task_show(ctx: typer.Context, task_id: TaskIdArg) -> None:
    state = common.get_state(ctx)
    task_id = validate_task_id(task_id)

    async def run() -> Task:
        async with common.make_client(state) as client:
            return await client.tasks.get(task_id)

    task = common.run_async(run())
    if state.needs_formatting:
        common.emit_structured(task, state)
        return
    if state.non_interactive:
        print_lines(
            [(task.id, task.state, task.entity.id, task.entity.kind, task.operation, task.startedTime, task.endTime)]
        )
        for step in sorted(task.steps, key=lambda item: item.sequence):
            print_lines([(step.sequence, step.operation, step.state, len(step.errors))])
        return

    print_fields(
        f"Task: {task.id}",
        [
            ("Operation", task.operation),
            ("State", task.state),
            ("Entity", f"{task.entity.kind} {task.entity.id}"),
            ("Started", common.timestamp_to_string(task.startedTime)),
            ("Finished", common.timestamp_to_string(task.endTime)),
            ("Duration", duration(task)),
        ],
    )
    if task.steps:
        typer.echo("")
        print_table(
            ["Step", "Operation", "State"],
            [(step.sequence, step.operation, step.state) for step in sorted(task.steps, key=lambda item: item.sequence)],
            total=False,
        )
    errors = task.step_errors()
    if errors:
        typer.echo("\nErrors:")
        for operation, error in errors:
            typer.echo(f"  {operation or '-'}: {error.code or '-'} {error.message}")


@app.command("monitor")
def task_monitor(ctx: typer.Context, task_id: TaskIdArg) -> None:
    """Wait for a task to finish."""

    state = common.get_state(ctx)
    task_id = validate_task_id(task_id)

    async def run() -> None:
        async with common.make_client(state) as client:
            await common.finish_task(client, state, await client.tasks.get(task_id))

    common.run_async(run())
