"""Top-level package for the Vegetation and Soil Analyzer client."""

from .config import AnalysisMode, AppConfig
from .services.session import AnalysisSession
from .settings_store import SettingsStore

__all__ = ["AnalysisMode", "AnalysisSession", "AppConfig", "SettingsStore"]
