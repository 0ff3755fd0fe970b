# SPDX-FileCopyrightText: Copyright (c) 2023-2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import asyncio
import logging
from contextlib import suppress
from functools import wraps
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler

from ._builders import (
    build_verification_pod,
    helloworld_pipeline,
    helloworld_pipeline_run,
    helloworld_task,
    helloworld_task_run,
)
from ._client import Kr8sClient
from ._config import ProbeConfig
from ._constants import HW_TASK_OUTPUT, HW_VALIDATION_POD_NAME
from ._exceptions import ConfigError, StreamReadError, VerificationError
from ._logs import fetch_output
from ._poll import wait_for_state
from ._predicates import fail_on_phase, phase_is
from ._verify import verify_output

console = Console()
app = typer.Typer(no_args_is_help=True)


def _typer_async(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        with suppress(asyncio.CancelledError, KeyboardInterrupt):
            return asyncio.run(f(*args, **kwargs))

    return wrapper


def register(app, func, alias=None):
    if asyncio.iscoroutinefunction(func):
        func = _typer_async(func)
    if alias is not None:
        app.command(alias)(func)
    else:
        app.command()(func)


def get_client(context: Optional[str] = None):
    return Kr8sClient(context=context)


def _fail(e: VerificationError):
    console.print(f"[red]error[/red]: {e}")
    if isinstance(e, StreamReadError) and e.partial:
        console.print("Partial output:", style="bold")
        console.print(e.partial, markup=False, highlight=False)
    raise typer.Exit(code=1)


async def _load_config() -> ProbeConfig:
    try:
        return await ProbeConfig()
    except ConfigError as e:
        _fail(e)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Log what runprobe is doing."
    ),
):
    """Verify that runs left the expected output on their volume claims."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


async def pod_spec(
    volume_claim: str = typer.Argument(..., help="Volume claim to mount"),
    namespace: str = typer.Option("default", "-n", "--namespace"),
    name: str = typer.Option(HW_VALIDATION_POD_NAME, "--name", help="Pod name"),
):
    """Print the verification pod for a volume claim as YAML."""
    config = await _load_config()
    pod = build_verification_pod(
        namespace,
        volume_claim,
        name=name,
        image=config.image,
        mount_path=config.log_path,
        file_name=config.log_file,
    )
    typer.echo(pod.to_yaml(), nl=False)


async def helloworld(
    namespace: str = typer.Option("default", "-n", "--namespace"),
    with_pipeline: bool = typer.Option(
        False, "--pipeline", help="Also print the pipeline running the task twice"
    ),
):
    """Print the hello world task and runs as YAML, ready for kubectl apply."""
    config = await _load_config()
    api_version = config.pipeline_api_version
    docs = [
        helloworld_task(namespace, ["echo", HW_TASK_OUTPUT], api_version),
        helloworld_task_run(namespace, api_version),
    ]
    if with_pipeline:
        docs += [
            helloworld_pipeline(namespace, api_version),
            helloworld_pipeline_run(namespace, api_version),
        ]
    typer.echo(
        yaml.safe_dump_all([d.to_dict() for d in docs], sort_keys=False), nl=False
    )


async def wait(
    name: str = typer.Argument(..., help="Pod to wait for"),
    namespace: str = typer.Option("default", "-n", "--namespace"),
    phases: List[str] = typer.Option(
        ["Running"], "--phase", help="Phase to wait for, may be repeated"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds to wait before giving up"
    ),
    context: Optional[str] = typer.Option(None, "--context"),
):
    """Wait for a pod to reach a phase.

    \b
    Waiting stops early with an error if the pod Failed, unless Failed is one of
    the requested phases.
    """
    config = await _load_config()
    predicate = phase_is(*phases)
    if "Failed" not in phases:
        predicate = fail_on_phase(predicate)
    try:
        state = await wait_for_state(
            get_client(context),
            name,
            namespace,
            predicate,
            "PodPhase",
            timeout=config.timeout if timeout is None else timeout,
            interval=config.poll_interval,
        )
    except VerificationError as e:
        _fail(e)
    console.print(f"pod/{name} is {state.status.phase}")


async def logs(
    name: str = typer.Argument(..., help="Pod to read"),
    namespace: str = typer.Option("default", "-n", "--namespace"),
    context: Optional[str] = typer.Option(None, "--context"),
):
    """Print the complete output of a pod."""
    try:
        output = await fetch_output(get_client(context), name, namespace)
    except VerificationError as e:
        _fail(e)
    typer.echo(output, nl=False)


async def verify(
    run_name: str = typer.Argument(..., help="Run whose volume claim to read"),
    namespace: str = typer.Option("default", "-n", "--namespace"),
    expect: Optional[str] = typer.Option(
        None, "--expect", help="Fail unless the log file contains exactly this"
    ),
    pod_name: str = typer.Option(HW_VALIDATION_POD_NAME, "--pod-name"),
    timeout: Optional[float] = typer.Option(None, "--timeout"),
    cleanup: bool = typer.Option(
        False, "--cleanup", help="Delete the verification pod afterwards"
    ),
    context: Optional[str] = typer.Option(None, "--context"),
):
    """Read the log file a run left on its volume claim.

    \b
    Examples:
    \b
        # Check the hello world run wrote the expected message
        runprobe verify helloworld-run --expect "do you want to build a snowman"
    """
    try:
        output = await verify_output(
            get_client(context),
            namespace,
            run_name,
            pod_name=pod_name,
            timeout=timeout,
            cleanup=cleanup,
        )
    except VerificationError as e:
        _fail(e)
    if expect is not None and output != expect:
        console.print(
            f"[red]error[/red]: {run_name} wrote {output!r}, expected {expect!r}"
        )
        raise typer.Exit(code=1)
    if expect is not None:
        console.print(f"[green]{run_name} wrote the expected output[/green]")
    else:
        typer.echo(output, nl=False)


register(app, pod_spec, "pod-spec")
register(app, helloworld)
register(app, wait)
register(app, logs)
register(app, verify)


def go():
    app()


if __name__ == "__main__":
    go()
