"""
Setup script for chem-task-engine.

Adaptive chemistry exercise engine for school-level practice. It serves
two roles:

1. Library - TaskEngine, evaluator and BKT mastery tracking
2. Practice CLI - generate exercises and drill weak competencies

The 'chemtask' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="chem-task-engine",
    version="0.1.0",
    description="Adaptive chemistry exercise generation with BKT mastery tracking",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    package_data={"chemtask": ["data/*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.12.0",
        "rich>=13.0.0",
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
            "chemtask=chemtask.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
        "Topic :: Scientific/Engineering :: Chemistry",
    ],
    keywords="chemistry education exercises adaptive-learning bkt cli",
)
