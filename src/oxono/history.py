"""Undo / redo stacks of executed commands"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from src.oxono.commands import Command

logger = logging.getLogger(__name__)


@dataclass
class CommandHistory:
    undo_stack: list[Command] = field(default_factory=list)
    redo_stack: list[Command] = field(default_factory=list)

    def execute(self, command: Command) -> None:
        """Run the command and record it. A new action makes the undone branch unreachable."""
        command.execute()
        self.undo_stack.append(command)
        self.redo_stack.clear()

    def undo(self) -> Optional[Command]:
        """Revert the last command and return it (None if there is nothing to undo)"""
        if not self.undo_stack:
            logger.debug("Nothing to undo.")
            return None
        command = self.undo_stack.pop()
        command.undo()
        self.redo_stack.append(command)
        return command

    def redo(self) -> Optional[Command]:
        if not self.redo_stack:
            logger.debug("Nothing to redo.")
            return None
        command = self.redo_stack.pop()
        command.execute()
        self.undo_stack.append(command)
        return command

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def peek_redo(self) -> Optional[Command]:
        return self.redo_stack[-1] if self.redo_stack else None

    def clear(self) -> None:
        self.undo_stack.clear()
        self.redo_stack.clear()
