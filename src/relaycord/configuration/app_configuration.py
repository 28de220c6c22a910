from __future__ import annotations
from pathlib import Path
import fcntl
import os
from typing import Any, Dict
import yaml

from relaycord.configuration.template_settings import TemplateSettings
from relaycord.datatypes.staff_datatypes import StaffRoster
from relaycord.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path(os.environ.get("RELAYCORD_CONFIG", "./config/app_config.yml")).resolve()

DEFAULT_ADMIN_CAPABILITIES: tuple[str, ...] = (
    "administrator",
    "manage_guild",
    "manage_roles",
    "manage_channels",
    "kick_members",
    "ban_members",
)

WEBHOOK_KINDS: tuple[str, ...] = ("status", "loader", "error", "misc")


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of the config file, exposes dictionary-like
    access helpers and resolves the staff roster, message templates, admin
    capability set and webhook credentials. Uses fcntl file locks for safe
    concurrent access across processes.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def _section(self, name: str) -> Dict[str, Any]:
        section = self._data.get(name, {})
        return section if isinstance(section, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping.

        The returned dict is the internal cache. Callers should not mutate it.
        """
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def staff_roster(self) -> StaffRoster:
        """Return the bot staff roster built from the ``staff`` section.

        Built on every access so a :meth:`reload` is picked up by the next
        authorization check. Invalid ids are logged and the roster is empty.
        """
        try:
            return StaffRoster.from_mapping(self._section("staff"))
        except ValueError as exc:
            logger.error("[APP CONFIGURATION] Invalid staff roster: %s", exc)
            return StaffRoster()

    @property
    def templates(self) -> TemplateSettings:
        """Return the message templates wrapped in a TemplateSettings helper."""
        return TemplateSettings(self._section("templates"))

    @property
    def admin_capabilities(self) -> tuple[str, ...]:
        """Return the permission flags that make a member a guild admin."""
        values = self._section("permissions").get("admin_capabilities")
        if not values or not isinstance(values, list):
            return DEFAULT_ADMIN_CAPABILITIES
        return tuple(str(value) for value in values)

    @property
    def webhooks(self) -> Dict[str, Dict[str, str]]:
        """Return configured webhook credentials keyed by kind.

        Entries without both an id and a token are left out.
        """
        configured: Dict[str, Dict[str, str]] = {}
        for kind, entry in self._section("webhooks").items():
            if kind not in WEBHOOK_KINDS:
                logger.warning("[APP CONFIGURATION] Ignoring unknown webhook kind %r", kind)
                continue
            if not isinstance(entry, dict):
                continue
            webhook_id = str(entry.get("id") or "")
            token = str(entry.get("token") or "")
            if webhook_id and token:
                configured[kind] = {"id": webhook_id, "token": token}
        return configured


_app_config: AppConfig | None = None


def get_app_config() -> AppConfig:
    """Return the shared application-wide configuration, loading it on first use."""
    global _app_config
    if _app_config is None:
        _app_config = AppConfig(CONFIG_PATH)
    return _app_config
