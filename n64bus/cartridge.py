"""Cartridge images: byte order, save type detection and CIC seed."""

from __future__ import annotations

import hashlib
import os
import re
from dataclasses import dataclass, field
from enum import Enum, auto


class SaveType(Enum):
    """Kinds of save memory a cartridge may carry."""

    SRAM = auto()
    FLASH = auto()
    EEPROM_4K = auto()
    EEPROM_16K = auto()
    MEMPAK = auto()
    NO_SAVE = auto()


_Z64_MAGIC = 0x80371240
_V64_MAGIC = 0x37804012
_N64_MAGIC = 0x40123780

_HEADER_SIZE = 0x40
_CIC_HASH_END = 0x1000

_EEPROM_16K_GAMES = frozenset({
    "NB7", "NGT", "NFU", "NCW", "NCZ", "ND6", "NDO", "ND2", "N3D", "NMX",
    "NGC", "NIM", "NNB", "NMV", "NM8", "NEV", "NPP", "NUB", "NPD", "NRZ",
    "NR7", "NEP", "NYS",
})

_FLASH_GAMES = frozenset({
    "NCC", "NDA", "NAF", "NJF", "NKJ", "NZS", "NM6", "NCK", "NMQ", "NPN",
    "NPF", "NPO", "CP2", "NP3", "NRH", "NSQ", "NT9", "NW4", "NDP",
})

_NO_SAVE_GAMES = frozenset({"NPQ"})

_HEADER_SAVE_TYPES = {
    0: [],
    1: [SaveType.EEPROM_4K],
    2: [SaveType.EEPROM_16K],
    3: [SaveType.SRAM],
    5: [SaveType.FLASH],
}

_CIC_SEEDS = {
    "BF3620D30817007091EBE9BDDD1B88C23B8A0052170B3309CDE5B6B4238E45E7": 0x78,
    "04B7BC6717A9F0EB724CF927E74AD3876C381CBB280D841736FC5E55580B756B": 0x91,
    "36ADC40148AF56F0D78CD505EB6A90117D1FD6F11C6309E52ED36BC4C6BA340E": 0x85,
    "53C0088FB777870D0AF32F0251E964030E2E8B72E830C26042FD191169508C05": 0xDD,
}
_DEFAULT_CIC_SEED = 0x3F

_SAVE_EXTENSIONS = {
    SaveType.EEPROM_4K: ".eep",
    SaveType.EEPROM_16K: ".eep",
    SaveType.FLASH: ".fla",
    SaveType.SRAM: ".sra",
    SaveType.MEMPAK: ".mem",
}

_ROM_SUFFIX = re.compile(r"\.n64\Z|\.z64\Z|\.N64\Z|\.Z64\Z")
_DIRECTORY = re.compile(r".*/")


def _swap_chunks(data: bytes, size: int) -> bytearray:
    out = bytearray(len(data))
    whole = len(data) - len(data) % size
    for start in range(0, whole, size):
        out[start:start + size] = data[start:start + size][::-1]
    out[whole:] = data[whole:]
    return out


def normalize_rom(data: bytes) -> bytes:
    """Return the image in big-endian (z64) order.

    Byte-swapped (v64) and little-endian (n64) images are converted; an image
    with an unrecognised magic word comes back as zeros of the same length.
    """
    if len(data) < 4:
        raise ValueError("ROM image is too short to hold a header")
    magic = int.from_bytes(data[:4], "big")
    if magic == _Z64_MAGIC:
        return bytes(data)
    if magic == _V64_MAGIC:
        return bytes(_swap_chunks(data, 2))
    if magic == _N64_MAGIC:
        return bytes(_swap_chunks(data, 4))
    return bytes(len(data))


def _c_string(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


def _game_id(rom: bytes) -> str:
    return _c_string(rom[0x3B:0x3E])


def detect_save_types(rom: bytes) -> list[SaveType]:
    """Save memory used by a big-endian ROM image."""
    if len(rom) < _HEADER_SIZE:
        raise ValueError("ROM image is too short to hold a header")

    if _c_string(rom[0x3C:0x3E]) == "ED":
        code = rom[0x3F] >> 4
        try:
            return list(_HEADER_SAVE_TYPES[code])
        except KeyError:
            raise ValueError(f"unknown save type detected: {code}") from None

    game_id = _game_id(rom)
    if game_id in _EEPROM_16K_GAMES:
        return [SaveType.EEPROM_16K]
    if game_id in _FLASH_GAMES:
        return [SaveType.FLASH]
    if game_id in _NO_SAVE_GAMES:
        return []
    return [SaveType.EEPROM_4K, SaveType.SRAM]


def save_names(filename: str, save_types: list[SaveType]) -> list[str]:
    """Save file names for a ROM file name, one per save type."""
    names = []
    extension = ""
    for save_type in save_types:
        extension = _SAVE_EXTENSIONS.get(save_type, extension)
        name = _ROM_SUFFIX.sub(extension, filename)
        names.append(_DIRECTORY.sub("", name))
    return names


def cic_seed(rom: bytes) -> int:
    """The CIC seed the boot code expects, chosen by hashing the boot code."""
    if len(rom) < _CIC_HASH_END:
        raise ValueError("ROM image is too short to hold boot code")
    digest = hashlib.sha256(rom[_HEADER_SIZE:_CIC_HASH_END]).hexdigest().upper()
    return _CIC_SEEDS.get(digest, _DEFAULT_CIC_SEED)


@dataclass
class Cartridge:
    """A loaded ROM image in big-endian order."""

    rom: bytes
    game_id: str
    save_types: list[SaveType] = field(default_factory=list)


def load_cartridge(data: bytes) -> Cartridge:
    """Normalise a ROM image and detect its game id and save types."""
    rom = normalize_rom(data)
    save_types = detect_save_types(rom)
    return Cartridge(rom=rom, game_id=_game_id(rom), save_types=save_types)


def read_cartridge(path: str | os.PathLike) -> Cartridge:
    """Load a cartridge from a ROM file."""
    with open(path, "rb") as handle:
        return load_cartridge(handle.read())