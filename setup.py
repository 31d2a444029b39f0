from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="code-review-assistant",
    version="0.1.0",
    author="Code Review Assistant Contributors",
    author_email="",
    description="AI Code Review Assistant - paste code, get structured feedback from Gemini",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Quality Assurance",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "click>=8.0.0",
        "pyyaml>=6.0",
        "google-genai>=1.0.0",
        "rich>=13.0.0",  # For nice terminal output
        "pygments>=2.15.0",  # For editor syntax highlighting
        "pydantic>=2.0.0",
        "aiohttp>=3.8.0,<3.14",  # For the Supabase client (aioresponses 0.7.x breaks on 3.14)
        "fastapi>=0.100.0",  # For the web service
        "uvicorn>=0.22.0",  # For running service
        "python-dotenv>=1.0.0",  # For .env file support
    ],
    entry_points={
        "console_scripts": [
            "codereviewer=codereviewer.cli:main",
            "codereviewer-service=codereviewer.service:main",
        ],
    },
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-mock>=3.10.0",
            "aioresponses>=0.7.4",  # For mocking aiohttp
            "httpx>=0.24.0",  # For fastapi.testclient
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
            "isort>=5.12.0",
        ],
    },
)
