"""
Setup script for the Interview Grader package.
"""
from setuptools import setup, find_packages

# Read the long description from README.md
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="interview_grader",
    version="0.1.0",
    author="Interview Grader Team",
    author_email="example@example.com",
    description="Answer evaluation and session integrity engine for Java technical interviews",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/interview-grader",
    packages=find_packages(),
    package_data={
        "interview_grader": ["data/*.yaml"],
    },
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
        "pydantic>=2.5.2",
        "typing-extensions>=4.8.0",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "slowapi>=0.1.9",
        "pymongo>=4.5.0",
        "reportlab>=4.1.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "interview-grader=interview_grader.cli:main",
        ],
    },
)
