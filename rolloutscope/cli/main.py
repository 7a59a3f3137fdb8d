"""rolloutscope command-line interface.

Commands:
    rolloutscope inspect --tree FILE --rollout FILE [--json]   Summarise locally.
    rolloutscope query --tree FILE --rollout FILE [--json]     Summarise via the REST API.
    rolloutscope serve                                         Run the REST API.
    rolloutscope version                                       Print version and exit.

``query`` calls the REST API at http://localhost:8080 (configurable via
``--api-url``). Output is colourised for readability.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
import httpx

from rolloutscope import __version__
from rolloutscope.assembler import assemble, canary_detector_for
from rolloutscope.config import CANARY_DETECTORS, load_config
from rolloutscope.models.rollout import InvalidRolloutError
from rolloutscope.observability.logging import setup_logging

_DEFAULT_API_URL = "http://localhost:8080"

# ---------------------------------------------------------------------------
# Colour helpers
# ---------------------------------------------------------------------------

_HEALTH_COLORS: dict[str, str] = {
    "Healthy": "green",
    "Progressing": "yellow",
    "Suspended": "yellow",
    "Missing": "yellow",
    "Degraded": "red",
    "Unknown": "white",
}

_OUTCOME_COLORS: dict[str, str] = {
    "Successful": "green",
    "Running": "yellow",
    "Failure": "red",
    "Error": "bright_red",
}


def _styled_health(status: object) -> str:
    text = "?" if status is None else str(status)
    return click.style(text, fg=_HEALTH_COLORS.get(text, "white"))


def _styled_outcome(outcome: str) -> str:
    return click.style(outcome, fg=_OUTCOME_COLORS.get(outcome, "white"), bold=True)


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------


def _load_json(path: Path, label: str) -> object:
    """Read a JSON document, raising click.ClickException on failure."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise click.ClickException(f"Cannot read {label} file {path}: {exc.strerror or exc}") from exc
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{label} file {path} is not valid JSON: {exc.msg} (line {exc.lineno})") from exc


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def _post(api_url: str, path: str, body: dict[str, object]) -> dict[str, object]:
    """Perform a POST request and return the parsed JSON body.

    Raises click.ClickException on connection errors or non-2xx responses.
    """
    url = api_url.rstrip("/") + path
    try:
        with httpx.Client(timeout=30.0) as client:
            response = client.post(url, json=body)
        response.raise_for_status()
        return response.json()  # type: ignore[no-any-return]
    except httpx.ConnectError as err:
        raise click.ClickException(f"Cannot connect to rolloutscope API at {api_url}. Is the server running?") from err
    except httpx.HTTPStatusError as exc:
        _handle_error_response(exc.response)
        raise  # unreachable; _handle_error_response always raises


def _handle_error_response(response: httpx.Response) -> None:
    """Parse an error response body and raise a friendly ClickException."""
    try:
        data: dict[str, object] = response.json()
        error_code = str(data.get("error", "ERROR"))
        detail = str(data.get("detail", "Unknown error"))
        msg = f"{error_code}: {detail}"
    except ValueError:
        msg = f"HTTP {response.status_code}: {response.text[:200]}"
    raise click.ClickException(msg)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--api-url",
    default=_DEFAULT_API_URL,
    envvar="ROLLOUTSCOPE_API_URL",
    show_default=True,
    help="rolloutscope REST API base URL.",
)
@click.pass_context
def cli(ctx: click.Context, api_url: str) -> None:
    """rolloutscope - Argo Rollouts status from Argo CD resource trees."""
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url


@cli.command("version")
def cmd_version() -> None:
    """Print the rolloutscope version and exit."""
    click.echo(f"rolloutscope {__version__}")


_tree_option = click.option(
    "--tree",
    "tree_path",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="JSON file with the application resource tree.",
)
_rollout_option = click.option(
    "--rollout",
    "rollout_path",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="JSON file with the Rollout manifest.",
)
_json_option = click.option(
    "--json",
    "output_json",
    is_flag=True,
    default=False,
    help="Print raw JSON.",
)


# ---------------------------------------------------------------------------
# rolloutscope inspect
# ---------------------------------------------------------------------------


@cli.command("inspect")
@_tree_option
@_rollout_option
@click.option(
    "--canary-detector",
    type=click.Choice(sorted(CANARY_DETECTORS)),
    default="pod-hash",
    show_default=True,
    help="How the canary ReplicaSet is recognised.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log traversal diagnostics to stderr.")
@_json_option
def cmd_inspect(
    tree_path: Path,
    rollout_path: Path,
    canary_detector: str,
    verbose: bool,
    output_json: bool,
) -> None:
    """Summarise a rollout from local JSON files."""
    setup_logging("debug" if verbose else "warning", json_output=False)
    tree = _load_json(tree_path, "tree")
    rollout = _load_json(rollout_path, "rollout")
    try:
        info = assemble(tree, rollout, canary_detector=canary_detector_for(canary_detector))
    except InvalidRolloutError as exc:
        raise click.ClickException(f"INVALID_ROLLOUT: {exc}") from exc

    data = info.to_dict()
    if output_json:
        click.echo(json.dumps(data, indent=2))
        return
    _print_rollout(data)


# ---------------------------------------------------------------------------
# rolloutscope query
# ---------------------------------------------------------------------------


@cli.command("query")
@_tree_option
@_rollout_option
@_json_option
@click.pass_context
def cmd_query(ctx: click.Context, tree_path: Path, rollout_path: Path, output_json: bool) -> None:
    """Summarise a rollout through a running rolloutscope server."""
    api_url: str = ctx.obj["api_url"]
    body: dict[str, object] = {
        "tree": _load_json(tree_path, "tree"),
        "rollout": _load_json(rollout_path, "rollout"),
    }
    data = _post(api_url, "/api/v1/rollout-info", body)
    if output_json:
        click.echo(json.dumps(data, indent=2))
        return
    _print_rollout(data)


# ---------------------------------------------------------------------------
# rolloutscope serve
# ---------------------------------------------------------------------------


@cli.command("serve")
def cmd_serve() -> None:
    """Run the REST API, configured from ROLLOUTSCOPE_* environment variables."""
    import uvicorn

    from rolloutscope.api.app import create_app

    try:
        config = load_config()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(config.log.level)
    uvicorn.run(
        create_app(config),
        host=config.api.host,
        port=config.api.port,
        log_config=None,  # structlog handles all logging
        access_log=False,
    )


def _print_rollout(data: dict[str, object]) -> None:
    """Pretty-print a RolloutInfo dict."""
    meta: dict[str, object] = data.get("objectMeta", {})  # type: ignore[assignment]
    strategy = str(data.get("strategy", "?"))
    click.echo("")
    click.echo(
        click.style(f"Rollout {meta.get('name', '?')}", bold=True, underline=True)
        + f"  ({meta.get('namespace') or 'default'})"
    )
    click.echo("")
    click.echo(f"  {click.style('Strategy:', bold=True)}        {strategy}")
    if strategy == "Canary":
        click.echo(f"  {click.style('Step:', bold=True)}            {data.get('step') or '-'}")
        click.echo(f"  {click.style('Set Weight:', bold=True)}      {data.get('setWeight')}")
        click.echo(f"  {click.style('Actual Weight:', bold=True)}   {data.get('actualWeight')}")
    click.echo(
        f"  {click.style('Replicas:', bold=True)}        "
        f"current={data.get('current', 0)} updated={data.get('updated', 0)} available={data.get('available', 0)}"
    )

    containers: list[dict[str, object]] = data.get("containers", [])  # type: ignore[assignment]
    if containers:
        click.echo("")
        click.echo(click.style("Containers:", bold=True))
        for c in containers:
            click.echo(f"  {c.get('name', '?')}  {click.style(str(c.get('image', '?')), fg='cyan')}")

    replica_sets: list[dict[str, object]] = data.get("replicaSets", [])  # type: ignore[assignment]
    if replica_sets:
        click.echo("")
        click.echo(click.style(f"ReplicaSets ({len(replica_sets)}):", bold=True))
        for rs in replica_sets:
            rs_meta: dict[str, object] = rs.get("objectMeta", {})  # type: ignore[assignment]
            marker = click.style(" canary", fg="magenta") if rs.get("canary") else ""
            click.echo(
                f"  {rs_meta.get('name', '?')}  rev:{rs.get('revision', '0')}  {_styled_health(rs.get('status'))}{marker}"
            )
            pods: list[dict[str, object]] = rs.get("pods", [])  # type: ignore[assignment]
            for pod in pods:
                pod_meta: dict[str, object] = pod.get("objectMeta", {})  # type: ignore[assignment]
                click.echo(f"    {pod_meta.get('name', '?')}  {pod.get('status') or ''}")

    runs: list[dict[str, object]] = data.get("analysisRuns", [])  # type: ignore[assignment]
    if runs:
        click.echo("")
        click.echo(click.style(f"Analysis Runs ({len(runs)}):", bold=True))
        for run in runs:
            run_meta: dict[str, object] = run.get("objectMeta", {})  # type: ignore[assignment]
            click.echo(
                f"  {run_meta.get('name', '?')}  rev:{run.get('revision', '0')}  "
                f"{_styled_outcome(str(run.get('status', 'Error')))}"
            )

    click.echo("")


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
