from .logging import MixprecJSONFormatter, RotatingFileHandlerWithDir, setup_logging

__all__ = ["setup_logging", "MixprecJSONFormatter", "RotatingFileHandlerWithDir"]
