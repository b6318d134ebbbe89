"""CLI (Typer + Rich): diagnóstico y consultas manuales."""
