"""Operator-facing terminal surface: prompts, title cards and the CLI."""
