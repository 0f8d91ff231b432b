from setuptools import setup, find_packages

setup(
    name="skill-swap",
    version="1.0.0",
    packages=find_packages(include=["skill_swap", "skill_swap.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "starlette",
        "uvicorn",
        "sqlalchemy>=2.0",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt<5",
        "python-multipart",
        "pydantic[email]>=2",
        "pydantic-settings",
        "python-dotenv",
        "alembic"
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "skill-swap-seed=skill_swap.scripts.seed_achievements:main",
        ],
    },
)
