[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "riptide"
version = "0.1.0"
description = "Building blocks for a fast, encrypted, loss-tolerant UDP file transfer protocol"
requires-python = ">=3.10"
keywords = [
    "file-transfer",
    "udp",
    "forward-error-correction",
    "reed-solomon",
    "rsync",
    "delta",
    "blake3",
    "chacha20poly1305",
    "congestion-control",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: File Transfer Protocol (FTP)",
    "Topic :: System :: Networking",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cryptography",
    "lz4",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["riptide"]

[tool.hatch.build.targets.sdist]
include = [
    "riptide",
    "tests",
    "pyproject.toml",
]

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
warn_redundant_casts = true
