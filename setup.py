"""Package setup for wiki_session."""

from setuptools import setup, find_packages

setup(
    name="wiki-session",
    version="1.0.0",
    description="Bot login, cookie and token session layer for the MediaWiki action API",
    packages=find_packages(include=["wiki_session", "wiki_session.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "urllib3>=2.0.0",
        "colorlog>=6.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "wiki-session=wiki_session.cli:main",
        ],
    },
)
