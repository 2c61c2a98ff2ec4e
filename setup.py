"""Setup script for the project."""

from setuptools import setup, find_packages

setup(
    name="fitness-tracker-api",
    version="1.0.0",
    description="Fitness tracking API for workouts, meals and body measurements",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "motor>=3.3",
        "pymongo>=4.6",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "PyJWT>=2.8",
        "bcrypt>=4.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.26",
            "setuptools",
        ],
    },
    entry_points={
        "console_scripts": [
            "fitness-manage=scripts.manage:main",
        ],
    },
    python_requires=">=3.10",
)
