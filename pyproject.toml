[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "neotx"
version = "0.1.0"
description = "Transactions, witnesses, signers and NEP-6 contract helpers for the Neo N3 blockchain"
requires-python = ">=3.10"
keywords = ["neo", "blockchain", "transaction", "witness", "signer", "nep6"]
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
dependencies = [
    "cryptography",
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["neotx"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
