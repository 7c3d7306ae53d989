"""Command line tools and reports."""
