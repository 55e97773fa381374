from install_assistant.config.desktop_config import DesktopConfig

__all__ = ["DesktopConfig"]
