"""
Configuration management for relaycord.

- **app_configuration.py**: YAML configuration loader with fcntl-locked reads.
  Provides the bot staff roster, the admin capability set, webhook
  credentials and message templates. Falls back to defaults on missing or
  malformed config files.

- **template_settings.py**: Typed accessors for the error/success emotes and
  the generic error text used when reporting failures to users.
"""
