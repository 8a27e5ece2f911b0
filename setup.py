# setup.py
from setuptools import setup, find_packages

setup(
    name="utxo-gateway",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.100",
        "uvicorn>=0.23",
        "websockets>=11.0",
        "pydantic>=2.0",
        "asyncpg>=0.28",
        "aiohttp>=3.9",
        "PyYAML>=6.0",
        "prometheus-client>=0.17",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-mock>=3.10",
            "httpx>=0.24",
            "pytest-cov>=4.1",
            "black>=23.0",
            "isort>=5.12",
            "flake8>=6.0",
            "mypy>=1.0"
        ],
    },
    entry_points={
        "console_scripts": [
            "utxo-gateway=utxo_gateway.cli:main",
        ],
    },
    description="Read-only query gateway over an indexed UTXO ledger",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
