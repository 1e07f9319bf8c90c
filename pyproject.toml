[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mongometrics"
version = "0.1.0"
description = "Turn MongoDB server, replica set, oplog, database, collection and index statistics into Prometheus metrics"
requires-python = ">=3.10"
dependencies = [
    "pymongo",
]
keywords = ["mongodb", "prometheus", "metrics", "monitoring", "replica set", "oplog"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mongometrics"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
