"""Entry point for running askdad as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the askdad CLI application."""
    app()


if __name__ == "__main__":
    main()
