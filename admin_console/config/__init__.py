from admin_console.config.settings import settings, Settings

__all__ = ["settings", "Settings"]
