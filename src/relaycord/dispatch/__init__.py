"""
Outbound message pipeline.

- **content_limits.py**: Platform size limits and ``check_content``.
- **message_dispatcher.py**: ``MessageDispatcher`` (send, edit, DMs,
  error/success helpers and ``report_error``).
- **auto_delete.py**: Detached, failure-isolated message deletion.
"""
