"""Setup configuration for relaycord."""

from setuptools import setup, find_packages

setup(
    name="relaycord",
    version="0.0.1",
    description="Permission-aware message dispatch and staff checks for Discord bots",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.12",
    install_requires=[
        "py-cord>=2.4",
        "aiohttp>=3.9",
        "PyYAML>=6.0",
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.21",
        ],
    },
)
