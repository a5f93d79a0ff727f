"""Setup script for feedtrans."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README
readme = Path("README.md").read_text(encoding="utf-8")

setup(
    name="feedtrans-llms",
    version="1.0.0",
    description="Product feed translation with LLMs and industry glossaries",
    long_description=readme,
    long_description_content_type="text/markdown",
    license="MIT",

    packages=find_packages(exclude=["tests*", "docs*", "examples*"]),
    package_data={
        "feedtrans.translation.glossary": ["*.yaml"],
    },
    include_package_data=True,

    python_requires=">=3.9",

    install_requires=[
        "anthropic>=0.25.0",
        "pyyaml>=6.0",
        "rich>=13.0.0",
        "typer>=0.9.0",
        "loguru>=0.7.0",
        "python-dotenv>=1.0.0",
    ],

    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-asyncio>=0.21.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.4.0",
            "isort>=5.12.0"
        ],
    },

    entry_points={
        "console_scripts": [
            "feedtrans=cli.commands.main:cli",
        ],
    },

    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Text Processing :: Linguistic",
        "Topic :: Text Processing :: Markup :: XML",
    ],

    keywords="translation llm claude xml product-feed ecommerce glossary",
)
