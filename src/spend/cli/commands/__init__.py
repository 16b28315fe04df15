"""Command groups for the Spend CLI."""
