[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "robopallets"
version = "0.1.0"
description = "In-memory models of robot-economy ledger modules: datalog, launch, liability, digital twins, lighthouse rewards, subscriptions and XCM asset links"
requires-python = ">=3.10"
keywords = ["ledger", "blockchain", "robotics", "liability", "datalog", "subscriptions"]
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
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "pynacl",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["robopallets"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
