from typing import Any, Dict

DEFAULT_ERROR_EMOTE = "❌"
DEFAULT_SUCCESS_EMOTE = "✅"
DEFAULT_GENERIC_ERROR = "An unexpected error occurred. Please try again later."


class TemplateSettings:
    """Helper exposing typed accessors for the message template configuration.

    Wraps the ``templates`` section of the app config::

        templates:
          emotes:
            error: "❌"
            success: "✅"
          messages:
            generic_error: "Something went wrong."
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key` or `default` if missing."""
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return self.data

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.data.get(name, {})
        return section if isinstance(section, dict) else {}

    @property
    def error_emote(self) -> str:
        return str(self._section("emotes").get("error") or DEFAULT_ERROR_EMOTE)

    @property
    def success_emote(self) -> str:
        return str(self._section("emotes").get("success") or DEFAULT_SUCCESS_EMOTE)

    @property
    def generic_error(self) -> str:
        return str(self._section("messages").get("generic_error") or DEFAULT_GENERIC_ERROR)
