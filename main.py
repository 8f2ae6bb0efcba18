"""Main entry point for quiz-extractor CLI."""

from quiz_extractor.cli.app import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
