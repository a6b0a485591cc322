[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arbengine"
version = "0.1.0"
description = "Live crypto arbitrage monitor across spot, perpetual and synthetic instruments, with simulated execution"
requires-python = ">=3.10"
keywords = [
    "arbitrage",
    "crypto",
    "order book",
    "synthetic instruments",
    "black-scholes",
    "value at risk",
    "websocket",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "websocket-client",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
arbengine = "arbengine.app:main"

[tool.hatch.build.targets.wheel]
packages = ["arbengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
