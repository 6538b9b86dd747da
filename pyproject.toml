[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "n64bus"
version = "0.1.0"
description = "Memory, cartridge, save, TLB, DMA and interface register models for an N64 emulator core"
requires-python = ">=3.10"
dependencies = []
keywords = ["n64", "emulator", "rdram", "tlb", "dma", "cartridge", "eeprom", "flash"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["n64bus"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
