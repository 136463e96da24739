[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gudangpos"
version = "0.1.0"
description = "Warehouse back office for a point-of-sale system: goods, stock in and out, suppliers, shops, pre-orders and stock cards, kept in SQLite."
requires-python = ">=3.10"
dependencies = []
keywords = ["point-of-sale", "warehouse", "inventory", "stock", "fifo", "lifo", "sqlite"]
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
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gudangpos"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
