[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toolscript"
version = "0.1.0"
description = "Tool definitions, reference resolution and chat-completion types for scripted LLM tools"
requires-python = ">=3.10"
keywords = ["llm", "tools", "chat-completion", "agents", "scripting"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["toolscript"]

[tool.pytest.ini_options]
addopts = "-ra"
