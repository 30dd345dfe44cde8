from setuptools import setup, find_packages

setup(
    name="skillsync",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*", "alembic"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt<4.1",  # passlib 1.7 fails against newer bcrypt releases
        "pydantic[email]",
        "pydantic-settings",
        "python-dotenv",
        "alembic",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
