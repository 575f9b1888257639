[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tailfw"
version = "1.0.0"
description = "Control logic for a two-axis robotic tail: motion patterns, PID loops, sensor drivers, layered LED compositing and stored configuration."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "embedded",
    "servo",
    "pid",
    "encoder",
    "imu",
    "led",
    "animatronics",
    "motion-control",
]
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
    "Topic :: Software Development :: Embedded Systems",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tailfw"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
