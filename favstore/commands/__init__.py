from favstore.commands.base import Command
from favstore.commands.command_manager import CommandManager

__all__ = ["Command", "CommandManager"]
