#!/usr/bin/env python3
"""
Hoard - keep parameterized shell commands and pick them from an interactive search
"""
import os
import sys
import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.traceback import install

from config import Config
from credentials import APIKeyManager
from executor import CommandExecutor
from interactive import InteractiveSession, ValuePrompt
from logger import setup_logger
from exceptions import ConfigurationError, StoreError, ValidationError
from constants import APP_NAME, APP_VERSION, APP_DESCRIPTION, DEFAULT_NAMESPACE, EXECUTION_MODES
from session import SessionController
from trove import TroveStore

# Install rich traceback handler
install(show_locals=False)

# The session UI goes to stderr so stdout only ever carries the picked command
console = Console(stderr=True)
logger = setup_logger('cli')


def first_run_setup(cfg):
    """Ask for the default namespace and write the initial configuration"""
    try:
        namespace = Prompt.ask(
            "This is the first time running hoard. Choose a default namespace",
            default=DEFAULT_NAMESPACE,
            console=console
        )
    except EOFError:
        namespace = DEFAULT_NAMESPACE
    cfg.update_from_cli(**{'general.default_namespace': namespace.strip() or DEFAULT_NAMESPACE})
    logger.info(f"First run, writing configuration to {cfg.config_file}")
    cfg.save()


@click.group(invoke_without_command=True)
@click.option('--config', '-c', help='Configuration file path')
@click.option('--namespace', '-n', help='Namespace to open the session in')
@click.option('--mode', type=click.Choice(EXECUTION_MODES), help='What to do with the picked command')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config, namespace, mode, verbose, debug):
    """Hoard - search your hoarded commands and fill in their parameters"""
    ctx.ensure_object(dict)

    log_level = 'DEBUG' if debug else ('INFO' if verbose else 'WARNING')
    global logger
    logger = setup_logger('cli', level=log_level)

    try:
        cfg = Config(config)
        if not os.path.exists(cfg.config_file):
            first_run_setup(cfg)
        cfg.update_from_cli(**{'execution.mode': mode})
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    ctx.obj['config'] = cfg
    ctx.obj['namespace'] = namespace

    # If no subcommand, open the interactive session
    if ctx.invoked_subcommand is None:
        ctx.invoke(search)


@cli.command()
@click.pass_context
def search(ctx):
    """Search hoarded commands interactively"""
    config = ctx.obj['config']
    store = TroveStore(config.trove_path)

    try:
        entries = store.load()
    except StoreError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    api_key_manager = APIKeyManager(config.get('gpt.api_key'))
    controller = SessionController(
        entries,
        config,
        store,
        value_prompt=ValuePrompt(console),
        has_credential=api_key_manager.has_api_key(),
        namespace=ctx.obj.get('namespace'),
    )

    command = InteractiveSession(controller, config, console=console).run()
    if command is None:
        logger.debug("Session closed without a command")
        return

    try:
        success = CommandExecutor(console=console).handle(command, config.get('execution.mode'))
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    if not success:
        sys.exit(1)


@cli.command()
@click.pass_context
def config_show(ctx):
    """Show current configuration"""
    config = ctx.obj['config']

    # Hide sensitive information
    display_config = yaml.safe_load(yaml.safe_dump(config.config))
    api_key = display_config.get('gpt', {}).get('api_key')
    if api_key:
        display_config['gpt']['api_key'] = f"{api_key[:8]}..." if len(api_key) > 8 else "***"

    config_text = yaml.safe_dump(display_config, default_flow_style=False, indent=2)
    console.print(Panel(
        config_text,
        title=f"Configuration ({config.config_file})",
        expand=False
    ))
    console.print(f"Trove: {config.trove_path}")


@cli.command()
@click.pass_context
def config_init(ctx):
    """Initialize default configuration file"""
    config = ctx.obj['config']
    config_path = config.create_default_config()
    console.print(f"[green]Created default configuration at: {config_path}[/green]")
    console.print("Edit this file to customize your settings.")


@cli.command()
@click.option('--key', required=True, help='Configuration key (use dot notation, e.g., parameters.token)')
@click.option('--value', required=True, help='Configuration value')
@click.pass_context
def config_set(ctx, key, value):
    """Set a configuration value"""
    config = ctx.obj['config']

    if value.lower() in ('true', 'false'):
        value = value.lower() == 'true'

    try:
        config.update_from_cli(**{key: value})
        config.save()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)
    console.print(f"[green]Set {key} = {value}[/green]")


@cli.command()
@click.option('--key', 'api_key', help='API key to store (prompted for when omitted)')
def set_key(api_key):
    """Store the command generation API key in the system keyring"""
    if not api_key:
        api_key = click.prompt("Enter your GPT API key", hide_input=True)

    if APIKeyManager().store_api_key(api_key):
        console.print("[green]API key stored in the system keyring[/green]")
    else:
        console.print("[yellow]Could not store the key. Set HOARD_GPT_API_KEY or gpt.api_key instead.[/yellow]")
        sys.exit(1)


@cli.command()
def version():
    """Show version information"""
    console.print(f"[bold blue]{APP_NAME}[/bold blue]")
    console.print(f"Version: {APP_VERSION}")
    console.print(f"Description: {APP_DESCRIPTION}")


if __name__ == '__main__':
    cli()
