"""
Main entry point for the wiki_session package.

Allows running the CLI as: python -m wiki_session
"""

from wiki_session.cli import main

if __name__ == "__main__":
    main()
