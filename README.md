# retrokit

Building blocks for the runtime of a classic side-scrolling 2D game engine.
The package is a library with no dependencies outside the standard library.
It has no command-line program.

## Modules

- `retrokit.trig` provides fixed-point sine and cosine lookups (`sin512`, `cos512`, `sin256`, `cos256`) and an 8-bit arctangent lookup (`arctan_lookup`). The tables are built on first use. You can also rebuild them with `calculate_trig_angles()` or create your own `TrigTables()`.
- `retrokit.datafile` provides `DataFileReader`, which opens assets from a plain folder or from inside an encrypted packed data file.
  - Use `load_file`, `read`, `seek`, `tell`, `at_end` and `close` to work with an open asset. The reader is also a context manager.
  - `get_file_info` and `set_file_info` save a read position and reopen the asset there later.
  - An `overrides` mapping sends lower-case asset paths to replacement files on disk.
  - `check_rsdk_file` builds a reader and records which script bytecode is available in `bytecode_mode` (a `BytecodeMode`).
  - `copy_file_path` turns forward slashes into backslashes.
  - Failures raise `DataFileError`.
- `retrokit.ini` provides `IniParser`, a small INI reader and writer.
  - It reads typed values with `get_string`, `get_integer`, `get_float` and `get_bool`. Each returns `None` when the key is absent.
  - It stores values and comments with `set_string`, `set_integer`, `set_float`, `set_bool` and `set_comment`.
  - It renders the items with `dumps` and saves them with `write`.
  - Items are `ConfigItem` records with an `ItemType`.
- `retrokit.palette` provides `PaletteBank`, which holds eight 256-colour palettes.
  - Colours are packed as RGB565 or RGB5551 depending on the `RenderType`. The module-level `rgb888_to_rgb565` and `rgb888_to_rgb5551` functions do the same packing.
  - It supports per-line active palettes, copying, rotation, full and limited fades.
  - It loads `Data/Palettes/` files through a `DataFileReader`.
- `retrokit.input` provides `InputState`, which turns the set of held `Button`s into press and hold flags (`InputButton`) each frame.
  - It keeps a combined "any" button and runs a screen dimming timer.
  - It fills `InputData` snapshots with `check_key_press` and `check_key_down`.
  - `stick_delta` normalises a 16-bit stick axis.
- `retrokit.player` provides `ControlBuffers`, which drives a `Player`'s controls from input according to its `ControlMode`. It keeps sixteen frames of history and replays them to sidekick players.
- `retrokit.objects` decides whether an `Entity` runs this frame, from its `Priority` and the camera borders (`ObjectBorders`), with `is_active`.
  - `collect_active` and `collect_paused` call an update hook for each running entity and return per-layer draw lists.
  - `type_name` strips spaces from object names.

## Installation

```
pip install .
```

## Example

```python
from retrokit.ini import IniParser
from retrokit.trig import calculate_trig_angles, sin512, cos256

calculate_trig_angles()
print(sin512(0x80))   # 512
print(cos256(0))      # 256

config = IniParser()
config.parse("[Game]\nLanguage=0\nDevMenu=true\n")
print(config.get_bool("Game", "DevMenu"))   # True
config.set_integer("Window", "Scale", 2)
print(config.dumps())
```

## What the package does not do

The package holds state and rules only. It does not:

- open a window, draw sprites or play sound;
- run object scripts: entity behaviour comes from the hook you pass to `collect_active` or `collect_paused`;
- read devices: the host reports held buttons to `InputState.update`;
- discover or manage mods: building the `overrides` mapping for `DataFileReader` is left to the caller;
- provide haptic feedback.

## Running the tests

```
pip install .[test]
pytest
```