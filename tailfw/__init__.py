"""Motion control, sensor drivers, LED compositing and stored configuration for a two-axis robotic tail."""

__version__ = "1.0.0"