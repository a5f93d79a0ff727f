"""Command-line interface for feedtrans."""
