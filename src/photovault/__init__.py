"""photovault: size-bounded archive planning and memory lane for a photo library."""

__version__ = "0.3.0"
