"""Setup script for the Quiz Answer Evaluation Engine."""

from setuptools import setup, find_packages
import os

# Read README for long description
readme_path = os.path.join(os.path.dirname(__file__), "README.md")
if os.path.exists(readme_path):
    with open(readme_path, "r", encoding="utf-8") as fh:
        long_description = fh.read()
else:
    long_description = "Answer evaluation engine for quiz games with gated fuzzy text matching"


def read_requirements(filename):
    """Read requirements from file, skipping comments and includes."""
    requirements_path = os.path.join(os.path.dirname(__file__), filename)
    if not os.path.exists(requirements_path):
        return []
    with open(requirements_path, "r", encoding="utf-8") as fh:
        return [
            line.strip() for line in fh
            if line.strip() and not line.strip().startswith(("#", "-r"))
        ]


install_requires = read_requirements("requirements.txt")

setup(
    name="quiz-answer-engine",
    version="1.0.0",
    description="Answer evaluation engine for quiz games with gated fuzzy text matching",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    entry_points={
        "console_scripts": [
            "answer-engine=answer_engine.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Text Processing :: Linguistic",
        "Topic :: Games/Entertainment",
    ],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    include_package_data=True,
)
