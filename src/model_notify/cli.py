"""CLI entry point for model-notify diagnostics."""

import asyncio

import click

from model_notify import __version__
from model_notify.auth_profiles import normalize_provider_id, resolve_last_good_profile
from model_notify.config import load_config
from model_notify.formatting import format_target
from model_notify.log_tail import recover_chat_id
from model_notify.logging import setup_logging
from model_notify.paths import resolve_log_path
from model_notify.signature import build_signature, format_switch_message
from model_notify.target import resolve_delivery_target


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    help="Logging level.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also log to this file.",
)
@click.pass_context
def main(ctx: click.Context, log_level: str, log_file: str | None) -> None:
    """model-notify - Announce agent model switches on Telegram."""
    ctx.ensure_object(dict)
    ctx.obj["logger"] = setup_logging(log_level, log_file)


@main.command()
def version() -> None:
    """Show version."""
    click.echo(f"model-notify version {__version__}")


@main.command()
def target() -> None:
    """Show where notifications would be delivered."""
    click.echo(format_target(resolve_delivery_target()))


@main.command()
@click.argument("provider")
def profile(provider: str) -> None:
    """Show the last-good auth profile for PROVIDER."""
    click.echo(f"provider: {normalize_provider_id(provider)}")
    click.echo(f"profile: {resolve_last_good_profile(provider) or '(unknown)'}")


@main.command("chat-id")
def chat_id() -> None:
    """Recover the most recent chat id from the gateway log."""
    config = load_config()
    log_path = resolve_log_path(config.logging.file)
    recovered = recover_chat_id(log_path)
    if recovered is None:
        click.echo(f"No chat id found in {log_path}", err=True)
        raise SystemExit(1)
    click.echo(recovered)


@main.command()
@click.argument("provider")
@click.argument("model_id")
def signature(provider: str, model_id: str) -> None:
    """Show the signature and switch message for PROVIDER and MODEL_ID."""
    profile_id = resolve_last_good_profile(provider)
    click.echo(build_signature(provider, model_id, profile_id))
    click.echo(format_switch_message(provider, model_id, profile_id))


@main.command()
@click.argument("text")
def send(text: str) -> None:
    """Send TEXT to the resolved chat."""
    from model_notify.notifications import TelegramNotifier

    async def _send() -> bool:
        async with TelegramNotifier() as notifier:
            return await notifier.send(resolve_delivery_target(), text)

    if not asyncio.run(_send()):
        click.echo("Message not delivered", err=True)
        raise SystemExit(1)
    click.echo("Message sent")
