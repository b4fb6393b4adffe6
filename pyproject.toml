[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pdfinject"
version = "0.1.0"
description = "Read existing PDF files, duplicate and remove pages, and write the result back; with helpers for PDF image objects and RC4 protection values."
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["pdf", "xref", "pages", "image", "png", "jpeg", "encryption", "rc4"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pdfinject"]

[tool.hatch.build.targets.sdist]
include = ["pdfinject", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
