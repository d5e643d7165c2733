"""Command-line commands for harborrp."""
