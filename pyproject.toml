[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "loxgen"
version = "0.1.0"
description = "Building blocks for lexer and LALR(1) parser generators: character ranges, NFA/DFA construction and LR(1) tables"
requires-python = ">=3.10"
dependencies = []
keywords = ["lexer", "parser", "lalr", "lr1", "nfa", "dfa", "code-generation", "grammar"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["loxgen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
