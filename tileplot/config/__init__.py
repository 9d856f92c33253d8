"""Configuration for tileplot."""

from .config import Config, config
from .plot_config import PlotConfig

__all__ = ['Config', 'config', 'PlotConfig']
