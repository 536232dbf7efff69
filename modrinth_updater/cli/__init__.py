"""Command-line interface for modrinth-updater."""
