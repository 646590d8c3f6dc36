"""Command modules loaded on demand by ``feedtext.cli.cli_modular``."""
