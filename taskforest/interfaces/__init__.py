"""Interface layer for taskforest.

- cli: Typer command-line interface
- api: FastAPI HTTP interface
"""
