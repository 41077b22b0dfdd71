from setuptools import setup, find_namespace_packages

setup(
    name="famcal",
    version="1.0.0",
    packages=find_namespace_packages(include=["famcal", "famcal.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "sqlalchemy[asyncio]>=2.0",
        "aiosqlite",
        "pydantic>=2.0",
        "pydantic-settings",
        "python-dateutil",
        "python-json-logger>=3.1",
        "prometheus-client"
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx"
        ]
    },
)
