"""
Setup script for biaslab.

BiasLab is a terminal learning companion for cognitive biases and logical
fallacies. It serves three roles:

1. Practice - Multiple-choice scenarios with instant feedback
2. Progress - Per-concept mastery, daily streaks and badges
3. Library - Searchable reference entries for every concept

The 'biaslab' command is the primary entry point.
"""

from setuptools import find_packages, setup

setup(
    name="biaslab",
    version="1.0.0",
    description="Scenario-based practice for cognitive biases and logical fallacies",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="BiasLab",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"biaslab.content": ["data/*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Storage
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "biaslab=biaslab.cli.biaslab_cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning cognitive-bias fallacies cli education",
)
