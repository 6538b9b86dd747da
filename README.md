# n64bus

Building blocks for the memory side of an N64 emulator core, written as
plain Python objects: RDRAM, cartridge loading, save memory (EEPROM, SRAM
and Flash), the TLB, peripheral-interface DMA, and the status registers of
the audio, MIPS, peripheral and RDP interfaces. The only dependency is the
standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Overview

| Module               | What it holds                                                                                     |
|----------------------|---------------------------------------------------------------------------------------------------|
| `n64bus.memory`      | `Rdram`, `write_with_mask32`, `calculate_rdram_cycles`, `word_bytes_be`                           |
| `n64bus.cartridge`   | `Cartridge`, `SaveType`, `normalize_rom`, `detect_save_types`, `save_names`, `cic_seed`, `load_cartridge`, `read_cartridge` |
| `n64bus.saves`       | `SaveStorage` and `FlashMode`, with the size and id constants of the save chips                   |
| `n64bus.pidma`       | `adjusted_length` and the transfers `dma_cart_write`, `dma_sram_write`, `dma_sram_read`, `dma_flash_write`, `dma_flash_read` |
| `n64bus.tlb`         | `TLB`, `TlbEntry`, `TlbRegisters`                                                                 |
| `n64bus.peripheral`  | `PeripheralInterface` and its `calculate_cycles` domain timing                                    |
| `n64bus.rdp`         | `RDPInterface` command registers and status                                                       |
| `n64bus.registers`   | `BitRegister` and the bit-field registers `AIStatus`, `MIPSInterrupt`, `PIStatus`, `DPCStatus`    |
| `n64bus.timing`      | `Clock`, `Event` and `EventKind`, for cycle counting and scheduled events                         |

## Examples

Loading a cartridge. `.z64`, `.v64` and `.n64` byte orders are all turned
into big-endian order; the save types come from the header or the game id:

```python
from n64bus.cartridge import read_cartridge, save_names, cic_seed

cart = read_cartridge("roms/game.z64")
print(cart.game_id, cart.save_types)
print(save_names("roms/game.z64", cart.save_types))   # e.g. ['game.eep', 'game.sra']
print(hex(cic_seed(cart.rom)))
```

RDRAM keeps words in native order, so byte and halfword access see
big-endian order:

```python
from n64bus.memory import Rdram

rdram = Rdram()
rdram.write32(0x1000, 0xDEADBEEF)
assert rdram.read8(0x1000) == 0xDE
assert rdram.read16(0x1002) == 0xBEEF
```

Copying cartridge ROM into RDRAM over the peripheral interface; the
transfer returns the cycles it takes and advances the DMA addresses:

```python
from n64bus.peripheral import PeripheralInterface
from n64bus.pidma import dma_cart_write

pi = PeripheralInterface(dram_address=0x400, cart_address=0x10001000, wr_len=0xFF)
cycles = dma_cart_write(pi, rdram, cart.rom)
```

Flash save commands:

```python
from n64bus.cartridge import SaveType
from n64bus.saves import SaveStorage, FlashMode

saves = SaveStorage([SaveType.FLASH])
saves.format_flash()
saves.execute_flash_command(0x3C000000)   # select chip erase
saves.execute_flash_command(0x78000000)   # run the erase
assert saves.flash_mode is FlashMode.STATUS
```

`SaveStorage.load_files` reads save memories from files (creating missing
ones) and `SaveStorage.write_files` writes them back to the last file named.

Mapping a page through the TLB:

```python
from n64bus.tlb import TLB, TlbRegisters

tlb = TLB()
tlb.write(0, TlbRegisters(entry_hi=0x10000000, entry_lo0=(0x100 << 6) | 0b110))
assert tlb.lookup(0x10000123) == (0x100123, True)
```

Scheduling RDP work on a clock:

```python
from n64bus.rdp import RDPInterface
from n64bus.timing import Clock, EventKind

clock = Clock()
rdp = RDPInterface(clock, process_commands=lambda: 100)
rdp.write_register(0, 0x2000)   # start
rdp.write_register(1, 0x2040)   # end: runs the commands
clock.add_cycles(100)
assert [event.kind for event in clock.pop_due()] == [EventKind.RDP]
```

## What the package does not do

There is no single object that decodes the whole physical address map and
routes reads and writes to RDRAM, cartridge, save memory and registers; the
pieces above are meant to be joined by the caller. The package has no model
of the instruction or data caches, no PIF or controller (joybus) handling,
no audio DMA queue, and no MIPS interface logic beyond the `MIPSInterrupt`
bit-field register. Nothing is drawn to the screen and no sound is played.

## Errors

Bad input raises rather than returning a made-up value: `ValueError` for an
unknown peripheral domain, an unknown Flash command or erase, an invalid
Flash DMA, an unknown save type in a cartridge header, a ROM too short for
its header, or an unimplemented RDP register offset; `IndexError` for an
RDRAM access out of range.