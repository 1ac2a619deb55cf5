"""Command line interface for Theme Father."""

from __future__ import annotations

import asyncio

import typer
from loguru import logger

from themefather.bot import ThemeBot
from themefather.channels import ChannelManager, MessageBus, TelegramChannel, TelegramConfig
from themefather.completion import CompletionClient
from themefather.config import Settings, load_settings
from themefather.errors import ConfigurationError, ThemeFatherError
from themefather.logging_utils import configure_logging
from themefather.platforms import Platform
from themefather.state import ConversationStore, UserRequestState
from themefather.synthesizer import ThemeSynthesizer
from themefather.templates import TemplateStore

app = typer.Typer(name="themefather", help="Draft Telegram themes from a description.", add_completion=False)


def _build_synthesizer(settings: Settings, client: CompletionClient) -> ThemeSynthesizer:
    return ThemeSynthesizer(
        client,
        TemplateStore(),
        model=settings.model,
        temperature=settings.temperature,
        inactivity_timeout=settings.inactivity_timeout_seconds,
    )


def _parse_platform(value: str) -> Platform:
    platform = Platform.parse(value)
    if platform is None:
        choices = ", ".join(p.value for p in Platform)
        raise typer.BadParameter(f"unknown platform {value!r}, expected one of: {choices}")
    return platform


async def _serve(settings: Settings) -> None:
    if not settings.telegram_token:
        raise ConfigurationError("telegram token is not set (TELOXIDE_TOKEN or THEMEFATHER_TELEGRAM_TOKEN)")
    client = CompletionClient.from_settings(settings)
    bus = MessageBus()
    bot = ThemeBot(ConversationStore(), _build_synthesizer(settings, client), bus)
    manager = ChannelManager(bus, bot.handle_inbound)
    manager.register(TelegramChannel(bus, TelegramConfig(token=settings.telegram_token)))
    await manager.start()
    try:
        await manager.join()
    finally:
        await manager.stop()
        await client.close()


async def _synthesize_once(settings: Settings, platform: Platform, description: str) -> str:
    client = CompletionClient.from_settings(settings)
    synthesizer = _build_synthesizer(settings, client)

    async def echo(fragment: str) -> None:
        typer.echo(fragment, nl=False)

    try:
        output = await synthesizer.synthesize(
            UserRequestState(platform=platform, description=description),
            on_fragment=echo,
        )
    finally:
        await client.close()
    typer.echo()
    return output.theme


@app.command("run")
def run(
    model: str | None = typer.Option(None, "--model", "-m", help="Override the completion model"),
) -> None:
    """Start the Telegram bot and serve until interrupted."""
    settings = load_settings(model=model)
    configure_logging(level=settings.log_level)
    logger.info("Starting Theme Father Bot model={}", settings.model)
    try:
        asyncio.run(_serve(settings))
    except KeyboardInterrupt:
        logger.info("Theme Father Bot stopped")
    except ThemeFatherError as exc:
        logger.error("startup.failed error={}", exc)
        raise typer.Exit(1) from exc


@app.command("synthesize")
def synthesize(
    platform: str = typer.Argument(..., help="iOS, Android, macOS or Windows"),
    description: str = typer.Argument(..., help="How the theme should look"),
    model: str | None = typer.Option(None, "--model", "-m", help="Override the completion model"),
) -> None:
    """Draft one theme and stream it to stdout."""
    target = _parse_platform(platform)
    settings = load_settings(model=model)
    configure_logging(profile="console", level=settings.log_level)
    try:
        theme = asyncio.run(_synthesize_once(settings, target, description))
    except ThemeFatherError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
    if not theme:
        typer.echo("error: the model returned an empty theme", err=True)
        raise typer.Exit(1)


@app.command("template")
def template(platform: str = typer.Argument(..., help="iOS, Android, macOS or Windows")) -> None:
    """Print the template a platform's themes are drafted from."""
    target = _parse_platform(platform)
    try:
        typer.echo(TemplateStore().require(target))
    except ThemeFatherError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
