# setup.py
from setuptools import setup, find_packages

setup(
    name="linkcop",
    version="0.1.0",
    description="Асинхронный аудитор ссылок linkcop: битые и небезопасные ссылки сайта",
    packages=find_packages(include=["linkcop", "linkcop.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "multidict>=6.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "rich>=13.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["linkcop=linkcop.cli:cli"],
    },
    python_requires=">=3.11",
)
