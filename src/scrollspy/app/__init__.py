"""Application layer: option model and persistence helpers."""

from .config_store import OPTIONS_VERSION, SpyOptions, load_options, save_options  # noqa: F401

__all__ = ["OPTIONS_VERSION", "SpyOptions", "load_options", "save_options"]
