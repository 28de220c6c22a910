"""
relaycord - permission-aware message helpers for py-cord bots

relaycord sits between a bot's command layer and the Discord client. It
decides whether the bot (or a user) may act, and makes sure what the bot
sends fits Discord's limits before anything reaches the API.

Core Components:

- **Permission Resolver**: Channel capability checks, bot staff tiers
  (owner, admin, staff) and guild admin/moderator detection
- **Message Dispatcher**: Validated send/edit, direct messages,
  error/success helpers, categorized error reporting and auto-deletion
- **Webhook Notifier**: Fire-and-forget status/error webhooks
- **Configuration**: YAML config for staff, templates, admin capabilities and webhooks

Usage:
    from relaycord.bot_toolkit import BotToolkit
    toolkit = BotToolkit.from_config(bot)
    await toolkit.dispatcher.send(channel, "Hello!")
"""
