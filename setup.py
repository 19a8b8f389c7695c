from setuptools import setup, find_packages

setup(
    name="resumescorer",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"resumescorer.prompts": ["*.prompt"]},
    include_package_data=True,
    install_requires=[
        "openai>=1.30",
        "aiohttp>=3.9",
        "tenacity>=8.2",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "rich>=13.0",
        "pypdf>=4.0",
        "opentelemetry-api>=1.20",
        "typing_extensions>=4.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.25",
        ],
    },
    entry_points={
        "console_scripts": [
            "resumescorer=resumescorer.cli:main",
        ],
    },
    python_requires=">=3.9",
    author="resumescorer Team",
    description="Score PDF resumes against job descriptions with OpenAI",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
