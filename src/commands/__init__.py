"""
Command surface.

Canonical imports:
- `from commands.dispatcher import CommandDispatcher`
- `from commands.models import parse_command, CommandValidationError`
"""
