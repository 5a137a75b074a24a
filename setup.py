"""Setup configuration for solarprep."""

from setuptools import find_packages, setup

setup(
    name="solarprep",
    version="0.1.0",
    description="Historical solar, load, price and battery time-series preparation",
    author="AETHERVEIL",
    python_requires=">=3.11",
    packages=find_packages(where="src", include=["solarprep*"]),
    package_dir={"": "src"},
    install_requires=[
        "httpx>=0.27.0",
        "numpy>=1.26.0",
        "pandas>=2.2.0",
        "pydantic>=2.6.0",
        "pydantic-settings>=2.1.0",
    ],
    entry_points={
        "console_scripts": [
            "solarprep=solarprep.cli:cli_entry",
        ],
    },
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.23.0",
            "respx>=0.21.0",
            "python-dotenv>=1.0.0",
        ],
    },
)
