# runic

Building blocks for a small ray tracer, written in plain Python with no
dependencies outside the standard library.

## What is inside

- `runic.geometry`: `Vec3`, an immutable vector with arithmetic operators and
  `dot`, `cross`, `length` and `normalized` (which raises `ValueError` for the
  zero vector); `Ray` with `point_at(t)`; `Color`; and `HitRecord`.
- `runic.rng`: deterministic generators. `HashRandom` (a PCG-style hash with
  `next_float`, `random_in_unit_sphere`, `random_in_unit_disk`), `DRand48`,
  `Lcg` (`next_int`, `next_float`), `Lcg2` (`next_int`), and the helpers
  `tea(val0, val1, rounds)` and `rot_seed(seed, frame)`.
- `runic.camera`: `Camera`, a pinhole camera that builds primary rays with
  `get_ray(s, t)`. `move_to`, `look_towards` and `set_aspect_ratio` rebuild the
  view at once; `set_vfov` stores the new field of view, which takes effect at
  the next of those calls.
- `runic.cvar`: `CVar`, a named numeric setting whose `modified` flag is set by
  `set` and cleared by `read`, and `CVarDescriptor` for registering one.
- `runic.config`: `Config`, a registry of console variables. It reads
  `name = value;` statements from a file (`load_file`) or a string
  (`load_text`), answers console lines (`parse_input`), lists its contents
  (`report`) and writes archivable values back out (`dump`, `save`).
  `get_instance()` returns one shared registry; `ConfigError` is raised for
  unreadable or oversized input and empty commands.
- `runic.imagewrite`: BMP, TGA (plain or run-length encoded) and Radiance HDR
  encoders: `encode_bmp`, `encode_tga`, `encode_hdr` and their `write_*`
  counterparts.
- `runic.png`: `encode_png`, `write_png`, plus the `zlib_compress` and
  `crc32` routines it is built on.
- `runic.jpeg`: baseline JPEG encoding with `encode_jpeg` and `write_jpeg`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## A short example

```python
from runic.geometry import Vec3
from runic.camera import Camera
from runic.png import write_png

camera = Camera(Vec3(0, 0, 0), Vec3(0, 0, -1), Vec3(0, 1, 0), 90, 2.0, 0.0, 1.0)

width, height = 200, 100
pixels = bytearray()
for j in reversed(range(height)):
    for i in range(width):
        ray = camera.get_ray(i / width, j / height)
        d = ray.direction.normalized()
        t = 0.5 * (d.y + 1.0)
        r, g, b = (1 - t) + 0.5 * t, (1 - t) + 0.7 * t, 1.0
        pixels += bytes(int(255.99 * c) for c in (r, g, b))

write_png("sky.png", width, height, 3, bytes(pixels), 0)
```

## Configuration files

`Config.load_file` and `Config.load_text` read statements of the form

```
renderer.samples = 16;
camera.fov = 60;
```

Names are matched against variables already registered with
`Config.register` or `Config.register_descriptor`; unknown names are logged
and skipped. `Config.save` writes every archivable variable back as
`name = value;`.

A console line is handled by `Config.parse_input`: a bare name returns the
variable's description and current value, while `name value` or
`name = value` sets it.

## What it does not do

There is no renderer here: no scene, shapes, materials, lighting, window or
command-line program. `Camera.get_ray` always shoots rays from the camera's
origin, so the aperture does not produce depth of field.