"""
Setup script for adaptive-practice.

Adaptive practice engine for skill-tagged question banks. It serves
three roles:

1. Session Builder - Balanced weak/moderate/strong practice sessions
2. Drill Planner - Module drills that adapt difficulty between runs
3. Confidence Scorer - Per-answer confidence from timing, hints and difficulty

The 'practice' command is the operator entry point.
"""

from setuptools import find_packages, setup

setup(
    name="adaptive-practice",
    version="1.0.0",
    description="Adaptive question selection, difficulty adaptation and confidence scoring",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
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
            "practice=adaptive_practice.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning adaptive-practice mastery education",
)
