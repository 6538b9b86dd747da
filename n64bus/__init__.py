"""RDRAM, cartridge, save memory, TLB, PI DMA and interface register models for an N64 emulator core."""

__version__ = "0.1.0"