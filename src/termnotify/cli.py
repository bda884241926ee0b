"""CLI entry point for the termnotify command."""

from __future__ import annotations

import json

import click

from termnotify.config import ConfigError, NotifyConfig, load_config, serialize_config
from termnotify.detect import supported_terminals
from termnotify.logging import setup_logging
from termnotify.notifier import Notifier
from termnotify.osc.encode import ProgressState, Protocol, Urgency, hyperlink

_URGENCY_CHOICES = [u.name.lower() for u in Urgency]
_STATE_CHOICES = [s.name.lower() for s in ProgressState]
_MARKS = ("prompt-start", "command-start", "command-executed", "command-finished")


def _notifier(ctx: click.Context) -> Notifier:
    """Build the Notifier on first use (or use one injected via ``obj``)."""
    if "notifier" not in ctx.obj:
        try:
            ctx.obj["notifier"] = Notifier.from_config(ctx.obj["config"])
        except ValueError as e:
            raise click.ClickException(f"Config error: {e}")
    return ctx.obj["notifier"]


def _done(ok: bool) -> None:
    if not ok:
        raise SystemExit(1)


@click.group()
@click.option(
    "--log-level",
    default=None,
    envvar="TERMNOTIFY_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity (default: config or WARNING)",
)
@click.option(
    "--log-file", default=None, envvar="TERMNOTIFY_LOG_FILE", type=click.Path(), help="Log to file"
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True),
    help="Path to termnotify.yaml",
)
@click.option(
    "--protocol",
    default=None,
    type=click.Choice([p.value for p in Protocol] + ["auto"], case_sensitive=False),
    help="Force a notification dialect instead of auto-detecting",
)
@click.option("--stderr", "use_stderr", is_flag=True, help="Write sequences to stderr")
@click.version_option(package_name="termnotify")
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    config_path: str | None,
    protocol: str | None,
    use_stderr: bool,
) -> None:
    """termnotify -- desktop notifications through your terminal.

    \b
    Examples:
        termnotify send "Build finished" -t "CI"
        termnotify progress 42
        termnotify caps --json
    """
    ctx.ensure_object(dict)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(f"Config error: {e}")
    cfg.apply_env_overrides()
    if protocol is not None:
        cfg.protocol = protocol
    if use_stderr:
        cfg.output = "stderr"

    setup_logging(
        level=log_level or cfg.log_level,
        log_file=log_file or cfg.log_file,
        output=cfg.output,
    )

    ctx.obj["config"] = cfg


@main.command()
@click.argument("message")
@click.option("-t", "--title", default=None, help="Notification title (OSC 777 / OSC 99)")
@click.option(
    "-u",
    "--urgency",
    default=None,
    type=click.Choice(_URGENCY_CHOICES, case_sensitive=False),
    help="Urgency level (OSC 99 and notify-send only)",
)
@click.option("--id", "notification_id", default=None, help="Notification id for later close")
@click.option("--external", is_flag=True, help="Skip OSC and use the platform notifier")
@click.option("--any", "any_method", is_flag=True, help="Fall back to the platform notifier")
@click.option("--bell", is_flag=True, help="Fall back to the platform notifier, then the bell")
@click.pass_context
def send(
    ctx: click.Context,
    message: str,
    title: str | None,
    urgency: str | None,
    notification_id: str | None,
    external: bool,
    any_method: bool,
    bell: bool,
) -> None:
    """Send a desktop notification."""
    n = _notifier(ctx)
    level = Urgency.parse(urgency) if urgency else None
    if external:
        ok = n.send_external(message, title, level)
    elif bell:
        ok = n.send_or_bell(message, title)
    elif any_method:
        ok = n.send_any(message, title, level)
    else:
        ok = n.send(message, title, level, notification_id)
    if not ok:
        click.echo("Notification not delivered (see `termnotify caps`)", err=True)
    _done(ok)


@main.command()
@click.argument("notification_id")
@click.pass_context
def close(ctx: click.Context, notification_id: str) -> None:
    """Dismiss a notification by id (kitty / OSC 99 only)."""
    _done(_notifier(ctx).close(notification_id))


@main.command()
@click.argument("percent", type=click.IntRange(0, 100, clamp=True))
@click.option(
    "--state",
    default="normal",
    type=click.Choice(_STATE_CHOICES, case_sensitive=False),
    help="Progress bar state",
)
@click.pass_context
def progress(ctx: click.Context, percent: int, state: str) -> None:
    """Show a tab/taskbar progress bar (OSC 9;4)."""
    _done(_notifier(ctx).progress(percent, ProgressState[state.upper()]))


@main.command("progress-clear")
@click.pass_context
def progress_clear(ctx: click.Context) -> None:
    """Hide the progress bar."""
    _done(_notifier(ctx).progress_clear())


@main.command()
@click.option("--fireworks", is_flag=True, help="Fireworks instead of a dock bounce")
@click.pass_context
def attention(ctx: click.Context, fireworks: bool) -> None:
    """Request attention (iTerm2)."""
    _done(_notifier(ctx).request_attention(fireworks))


@main.command()
@click.pass_context
def focus(ctx: click.Context) -> None:
    """Bring the terminal window to the front (iTerm2)."""
    _done(_notifier(ctx).steal_focus())


@main.command()
@click.argument("url")
@click.argument("text", required=False)
@click.option("--id", "link_id", default=None, help="Group links sharing this id")
def link(url: str, text: str | None, link_id: str | None) -> None:
    """Print a clickable hyperlink (OSC 8)."""
    click.echo(hyperlink(url, text, link_id))


@main.command()
@click.argument("kind", type=click.Choice(_MARKS))
@click.option("--exit-code", default=0, type=int, help="Exit status for command-finished")
@click.pass_context
def mark(ctx: click.Context, kind: str, exit_code: int) -> None:
    """Emit a shell-integration mark (OSC 133)."""
    n = _notifier(ctx)
    if kind == "prompt-start":
        ok = n.shell_prompt_start()
    elif kind == "command-start":
        ok = n.shell_command_start()
    elif kind == "command-executed":
        ok = n.shell_command_executed()
    else:
        ok = n.shell_command_finished(exit_code)
    _done(ok)


@main.command("bell")
@click.pass_context
def bell_cmd(ctx: click.Context) -> None:
    """Ring the terminal bell."""
    _done(_notifier(ctx).bell())


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def caps(ctx: click.Context, as_json: bool) -> None:
    """Show what the current terminal supports."""
    data = _notifier(ctx).capabilities().as_dict()
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return
    for key, value in data.items():
        if isinstance(value, bool):
            value = "yes" if value else "no"
        click.echo(f"  {key:20s} {value if value is not None else '-'}")


@main.command()
def terminals() -> None:
    """List known terminals and the dialect each one uses."""
    for name, proto in supported_terminals().items():
        click.echo(f"  {name:20s} {proto or 'unsupported'}")


@main.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Validate the termnotify.yaml configuration."""
    cfg: NotifyConfig = ctx.obj["config"]
    errors = cfg.validate()
    if errors:
        click.echo(f"Found {len(errors)} error(s):", err=True)
        for e in errors:
            click.echo(f"  x {e}", err=True)
        raise SystemExit(1)
    source = cfg.source_path or "defaults"
    click.echo(f"Config OK ({source}): protocol={serialize_config(cfg)['protocol']}")
