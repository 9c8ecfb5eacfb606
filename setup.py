"""
Setup script for the WebPrint service.

Allows development installation with `pip install -e .[test]`
"""

from setuptools import setup, find_packages

setup(
    name="webprint-service",
    version="0.1.0",
    description="Print web pages to PDF with Playwright, with optional LLM-suggested filenames",
    packages=find_packages(include=["webprint_service", "webprint_service.*"]),
    package_data={"webprint_service": ["static/*.html"]},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.100",
        "uvicorn>=0.23",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "httpx>=0.24",
        "playwright>=1.40",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "webprint-service=webprint_service.app:main",
        ],
    },
)
