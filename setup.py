"""Setup script for the agentorch package."""

from setuptools import setup, find_namespace_packages

setup(
    name="agentorch",
    version="0.1.0",
    packages=find_namespace_packages(include=["agentorch", "agentorch.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.5",
        "pydantic-settings>=2.0",
        "structlog>=23.1",
        "prometheus-client>=0.17",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.21",
        ],
    },
    description="agentorch - goal routing and workflow orchestration for specialized business agents",
    author="NeuraForge Team",
)
