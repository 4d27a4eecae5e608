"""
Setup script for colsparse

Pure-Python package in a src/ layout. Runtime dependency is numpy;
scipy is an optional extra used only for interop (from_scipy/to_scipy).
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/colsparse/__init__.py
def get_version():
    version_file = Path("src/colsparse/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="colsparse",
    version=get_version(),
    description="Column-oriented sparse matrices with LibSVM text I/O",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.23",
    ],
    extras_require={
        "scipy": ["scipy>=1.9"],
        "test": ["pytest>=7", "scipy>=1.9"],
    },
    zip_safe=False,
)
