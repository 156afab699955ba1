"""Main entry point for the Jira Issue Skills server."""

from src.main import main


if __name__ == "__main__":
    main()
