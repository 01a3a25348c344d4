from .settings import TokenizeSettings, settings

__all__ = ["TokenizeSettings", "settings"]
