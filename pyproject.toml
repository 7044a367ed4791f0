[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tdswire"
version = "0.12.3"
description = "Encoding and decoding of TDS (Tabular Data Stream) protocol messages and tokens"
requires-python = ">=3.10"
dependencies = []
keywords = ["tds", "mssql", "sql-server", "protocol", "codec"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tdswire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
