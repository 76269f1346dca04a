"""Install the family tree backend."""

from setuptools import setup, find_packages

setup(
    name='family-tree-backend',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.10',
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "pydantic>=2",
        "pyjwt",
        "google-auth",
        "requests",
        "cachecontrol",
        "python-json-logger",
        "click",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "family-tree=family_tree.cli:cli",
        ],
    },
    zip_safe=False
)
