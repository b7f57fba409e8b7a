"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .keyboard import KeyType, ctrl

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class Movement(Enum):
    """Cursor movements bound to navigation keys."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HEAD = "head"
    TAIL = "tail"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


class EditorCommand(ABC):
    """Base class for editor commands."""

    # Handling this command cancels a pending quit confirmation
    resets_quit_confirmation = True

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the document
        """
        pass


class MovementCommand(EditorCommand):
    """Moves the cursor; never modifies the document."""

    def __init__(self, movement: Movement):
        self.movement = movement

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        editor.move_cursor(self.movement)
        return False


class EditCommand(EditorCommand):
    """Base class for editing commands.

    Edits report whether the buffer actually changed, so no-op edits
    (Backspace at the start of the document) leave the dirty flag alone.
    """

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        return self._edit(editor, key_event)

    @abstractmethod
    def _edit(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Perform the edit."""
        pass


class InsertTextCommand(EditCommand):
    def _edit(self, editor, key_event):
        char = '\t' if key_event.key_type == KeyType.TAB else key_event.value
        return editor.insert_char(char)


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key_event):
        return editor.insert_newline()


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key_event):
        return editor.delete_char()


class DeleteCharCommand(EditCommand):
    def _edit(self, editor, key_event):
        return editor.delete_forward()


class DeleteRowCommand(EditCommand):
    def _edit(self, editor, key_event):
        return editor.delete_row()


class SystemCommand(EditorCommand):
    """Base class for system commands like save, search, quit."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """System commands don't modify document content directly."""
        self._execute_system(editor, key_event)
        return False

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class SaveCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.save()


class FindCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.find()


class FindNextCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.find_next()


class FindPreviousCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.find_previous()


class QuitCommand(SystemCommand):
    resets_quit_confirmation = False

    def _execute_system(self, editor, key_event):
        editor.request_quit()


class CommandRegistry:
    """Registry for mapping keys to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._insert_text = InsertTextCommand()
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.ARROW_UP, ''), MovementCommand(Movement.UP))
        self.register((KeyType.ARROW_DOWN, ''), MovementCommand(Movement.DOWN))
        self.register((KeyType.ARROW_LEFT, ''), MovementCommand(Movement.LEFT))
        self.register((KeyType.ARROW_RIGHT, ''), MovementCommand(Movement.RIGHT))
        self.register((KeyType.HOME, ''), MovementCommand(Movement.HEAD))
        self.register((KeyType.END, ''), MovementCommand(Movement.TAIL))
        self.register((KeyType.PAGE_UP, ''), MovementCommand(Movement.PAGE_UP))
        self.register((KeyType.PAGE_DOWN, ''), MovementCommand(Movement.PAGE_DOWN))

        # Editing commands
        self.register((KeyType.TAB, ''), self._insert_text)
        self.register((KeyType.ENTER, ''), InsertNewlineCommand())
        self.register((KeyType.BACKSPACE, ''), BackspaceCommand())
        self.register((KeyType.CHARACTER, ctrl('h')), BackspaceCommand())
        self.register((KeyType.DELETE, ''), DeleteCharCommand())
        self.register((KeyType.CHARACTER, ctrl('d')), DeleteRowCommand())

        # System commands
        self.register((KeyType.CHARACTER, ctrl('s')), SaveCommand())
        self.register((KeyType.CHARACTER, ctrl('f')), FindCommand())
        self.register((KeyType.CHARACTER, ctrl('n')), FindNextCommand())
        self.register((KeyType.CHARACTER, ctrl('p')), FindPreviousCommand())
        self.register((KeyType.CHARACTER, ctrl('q')), QuitCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key."""
        self._commands[key] = command

    def get_command(self, key_event: 'KeyEvent') -> Optional[EditorCommand]:
        """Get the command for a key event.

        Printable characters without a binding insert themselves. Returns
        None for keys that do nothing (including NOTHING).
        """
        command = self._commands.get((key_event.key_type, key_event.value))
        if command is not None:
            return command
        if key_event.key_type == KeyType.CHARACTER and not key_event.is_ctrl:
            return self._insert_text
        return None
