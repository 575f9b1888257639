# tailfw

Control logic for a two-axis robotic tail. Each axis is driven by two
continuous-rotation servos, each closed-loop against a magnetic encoder;
two IMUs report gravity and taps; a ring-shaped LED matrix shows layered
effects. The hardware is reached only through small objects you hand in
(an I2C transport, a PWM output, an LED strip), so everything runs and
tests on an ordinary computer.

## Installation

```
pip install tailfw
```

For running the test suite:

```
pip install "tailfw[test]"
pytest
```

## Modules

| Module | What it holds |
| --- | --- |
| `tailfw.color` | `RGB`, `HSV`, integer `hsv_to_rgb`, and the blends `rgb_multiply`, `rgb_add`, `rgb_subtract`, `rgb_min`, `rgb_max`, `rgb_overwrite` |
| `tailfw.effect` | `LedCoord` and the abstract `LedEffect` base class with flip/mirror transforms |
| `tailfw.led_matrix` | `LedMatrix`: rings of LEDs mapped into the unit square, a pixel buffer, `push()` to a strip |
| `tailfw.compositor` | `BlendMode`, `blend()`, `Layer`, `LayerCompositor` |
| `tailfw.patterns` | `MotionInput`, `MotionPattern`, `StaticPattern`, `WaggingPattern`, `LoosePattern`, `PatternId`, `create_pattern()` |
| `tailfw.pid` | `PidController` |
| `tailfw.servo` | `ServoBank`, `clamp_speed()`, `speed_to_duty()` |
| `tailfw.i2c_mux` | `I2CMux`, `BusError` |
| `tailfw.encoder` | `Encoder` (12-bit raw angle with multi-turn counting), `parse_raw_angle()` |
| `tailfw.imu` | `Imu`, `ImuError`, `parse_raw_xyz()` |
| `tailfw.axis_controller` | `AxisController`: two servo/encoder halves under PID |
| `tailfw.motion_system` | `MotionSystem`: both axes, both IMUs and the active pattern |
| `tailfw.config_types` | `SystemConfig` and its parts, with a fixed binary layout |
| `tailfw.storage` | `ConfigStore`: configuration records as files, plus four profile slots |

## Colours and blending

```python
from tailfw.color import HSV, RGB, hsv_to_rgb, rgb_add, rgb_overwrite
from tailfw.compositor import BlendMode, blend

red = hsv_to_rgb(HSV(h=0, s=255, v=255))
print(rgb_add(red, RGB.white()))             # channels saturate at 255
print(rgb_overwrite(red, RGB.black()))       # a black overlay keeps the base
print(blend(red, RGB.white(), BlendMode.MULTIPLY))
```

`RGB` and `HSV` are frozen dataclasses that reject out-of-range channels
with `ValueError`. `blend()` with a mode it does not know returns the
overlay.

## LED matrix and layers

An effect subclasses `LedEffect` and returns one colour per coordinate.
`transform_coord()` applies the `mirror_x`/`mirror_y` folds first, then
the `flip_x`/`flip_y` flips.

```python
from tailfw.color import RGB
from tailfw.compositor import BlendMode, LayerCompositor
from tailfw.effect import LedEffect
from tailfw.led_matrix import LedMatrix


class LeftHalfRed(LedEffect):
    def render(self, coords, dt):
        return [RGB(255, 0, 0) if self.transform_coord(c).x < 0.5 else RGB.black()
                for c in coords]

    def set_param(self, param_id, value):
        pass

    def get_param(self, param_id):
        return 0.0


matrix = LedMatrix()              # no strip attached: push() does nothing
matrix.configure([4, 4, 4])       # three rings of four LEDs
compositor = LayerCompositor(8)
compositor.set_layer(0, LeftHalfRed(), BlendMode.OVERWRITE)
compositor.render(matrix, dt=0.033)
print(matrix.pixels[:4])
```

Rings map to `y` (first ring 0.0, last ring 1.0) and the LEDs of a ring
to `x`; a single ring or a single LED sits at 0.5. A strip passed to
`LedMatrix` needs `set_pixel(index, r, g, b)`, `refresh()` and
`resize(num_leds)`; `resize` is called when `configure` changes the LED
count.

## Motion

```python
from tailfw.patterns import MotionInput, create_pattern
from tailfw.pid import PidController

wag = create_pattern(1)          # WaggingPattern
wag.set_param(0, 2.0)            # frequency in Hz
print(wag.get_param(1))          # x amplitude: 45.0 degrees
targets = wag.update(MotionInput(dt=0.01))   # four target angles

pid = PidController()            # kp=1, output within -1000..1000
pid.set_gains(4.0, 0.5, 0.1)
speed = pid.update(setpoint=30.0, measurement=10.0, dt=0.01)
```

Pattern parameters:

- `StaticPattern`: 0–3 hold angles for X-first, X-second, Y-first, Y-second.
- `WaggingPattern`: 0 frequency (Hz), 1 X amplitude (degrees), 2 and 3 the
  two Y positions. The second X half lags the first by π/4.
- `LoosePattern`: 0 damping (clamped to 0–1), 1 reactivity (clamped to
  0–10). The tail swings against the gravity tilt through two chained
  spring-dampers per axis.

`create_pattern()` returns `None` for an unknown id.

## Hardware access

- `I2CMux(transport)` needs a transport with `write(address, data)` and
  `write_read(address, data, length)`, raising `BusError` when a
  transfer fails. It disables all channels on construction and only
  re-sends a channel selection when the channel changes.
- `ServoBank(output)` needs an output with `set_duty(channel, duty)`.
  Speeds run from -1000 to 1000 and map to 500–2500 µs pulses at 50 Hz
  with 14-bit duty (`speed_to_duty(0) == 1228`).
- `Encoder.read_angle()` gives a continuous angle in degrees, counting a
  wrap whenever the raw value jumps by more than half a turn, and 0.0 if
  the bus fails.
- `Imu.init()` resets and configures the sensor and raises `ImuError` on a
  wrong chip id; `gravity_vector()` gives a unit vector; `check_tap()` is
  true on the rising edge of an acceleration spike above 2.5 g.

`MotionSystem(servos).init(mux, config)` maps servos to axes from the
configuration (servos 0/1 on X and 2/3 on Y unless assigned otherwise),
brings up encoders and IMUs, and applies axis limits. Call
`update(dt)` at 100 Hz. An encoder or IMU that fails to initialise, or
fails ten reads in a row, is switched off; an axis whose two encoders
have both failed stops driving its servos. `check_tap_base()` and
`check_tap_tip()` report a tap once and clear it.

## Stored configuration

```python
from tailfw.config_types import SystemConfig
from tailfw.storage import MAIN_NAMESPACE, ConfigStore, profile_namespace

store = ConfigStore("state")
config = SystemConfig()
config.axes[0].limit_min, config.axes[0].limit_max = -60.0, 60.0
store.save_config(MAIN_NAMESPACE, config)
store.save_config(profile_namespace(2), config)

print(store.load_config(MAIN_NAMESPACE) == config)   # True
print(store.profile_slots())                       # [False, False, True, False]
store.erase(profile_namespace(2))
```

`SystemConfig.to_bytes()` and `from_bytes()` use one fixed little-endian
layout of `CONFIG_BLOB_SIZE` bytes; `load_config()` returns `None` for a
missing file or one of the wrong size. Saves go through a temporary file
and an atomic rename.

## What the package does not do

- It ships no ready-made LED effects: `LedEffect` is a base class to
  subclass, and there are no audio-reactive effects or audio input.
- It does not receive or decode BLE commands, does not encode read-back
  state payloads, and does not debounce saves: storing a configuration is
  an explicit `ConfigStore.save_config()` call.
- It has no command-line program and no scheduler; running
  `MotionSystem.update()` and `LayerCompositor.render()` at their rates is
  up to the caller.