[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stagehand"
version = "0.1.0"
description = "Building blocks for LLM-driven browser automation: page context tracking, structured logging, token metrics, chat completion clients, prompt builders and network settle tracking."
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["browser", "automation", "llm", "openai", "chat-completion", "metrics", "logging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Browsers",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["stagehand"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
