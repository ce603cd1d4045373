[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "microws"
version = "0.1.0"
description = "Building blocks for HTTP and WebSocket servers: URL routing, query decoding, permessage-deflate streams and WebSocket route settings"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "websocket", "router", "permessage-deflate", "query-string"]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["microws"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
