from logindesk.core.config.manager import ConfigManager
from logindesk.core.config.models import AppConfig
from logindesk.core.config.paths import ConfigFsPaths

__all__ = ["AppConfig", "ConfigFsPaths", "ConfigManager"]
