"""CLI entry point for feedtrans."""

from cli.commands.main import cli

if __name__ == "__main__":
    cli()
