"""Configuration modules"""

from .config_loader import ConfigLoader
from .model_config import ModelInfo, ModelRegistry

__all__ = ["ConfigLoader", "ModelInfo", "ModelRegistry"]
