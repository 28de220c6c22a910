"""
Utility helpers for relaycord.

- **logger.py**: Centralized logging configuration with colored console output
  through prompt_toolkit and a per-session rotating log file. Quiets the
  chatty discord/aiohttp loggers.
"""
