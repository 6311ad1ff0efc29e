"""leadqueue setup - Offline-resilient lead form submissions."""
from setuptools import setup, find_packages

setup(
    name="leadqueue",
    version="1.0.0",
    description="leadqueue: Lead form submissions that survive going offline",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "requests>=2.28",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "leadq=leadqueue.cli.main:cli",
        ],
    },
)
