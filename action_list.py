"""
Ordered, in-memory list of macro actions edited through the GUI.

SRP: this class owns the action sequence and nothing else. The GUI
subscribes to changes instead of mutating the list directly.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import fields
from typing import Callable, Iterator, List, Optional

from models import ActionType, MacroAction, MouseButton

ChangeListener = Callable[[], None]

_EDITABLE_FIELDS = {f.name for f in fields(MacroAction)} - {"id", "type"}


def new_action_id() -> str:
    """Short random identifier, unique for all practical purposes."""
    return uuid.uuid4().hex[:9]


def default_actions() -> List[MacroAction]:
    """Sample macro shown when the editor starts."""
    return [
        MacroAction(
            id=new_action_id(),
            type=ActionType.CLICK,
            x=500,
            y=300,
            button=MouseButton.LEFT,
            jitter=True,
            comment="Open program",
        ),
        MacroAction(id=new_action_id(), type=ActionType.WAIT, duration=1500, comment="Wait for load"),
        MacroAction(id=new_action_id(), type=ActionType.KEYPRESS, key="Enter", comment="Confirm action"),
    ]


class ActionList:
    """Manages the macro timeline."""

    def __init__(self, actions: Optional[List[MacroAction]] = None) -> None:
        self._actions: List[MacroAction] = []
        self._listeners: List[ChangeListener] = []
        for action in actions or []:
            if self.get(action.id) is not None:
                raise ValueError(f"Duplicate action id: {action.id}")
            self._actions.append(action)

    def __iter__(self) -> Iterator[MacroAction]:
        return iter(list(self._actions))

    def __len__(self) -> int:
        return len(self._actions)

    def __getitem__(self, index: int) -> MacroAction:
        return self._actions[index]

    @property
    def actions(self) -> List[MacroAction]:
        """Snapshot of the current sequence."""
        return list(self._actions)

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback invoked after every mutation."""
        self._listeners.append(listener)

    # Queries ----------------------------------------------------------

    def get(self, action_id: str) -> Optional[MacroAction]:
        for action in self._actions:
            if action.id == action_id:
                return action
        return None

    def index_of(self, action_id: str) -> int:
        """Position of the action, or -1 if it is not in the list."""
        for index, action in enumerate(self._actions):
            if action.id == action_id:
                return index
        return -1

    # Mutations --------------------------------------------------------

    def add(self, action_type: ActionType) -> MacroAction:
        """Append a new action pre-filled with editor defaults."""
        action = MacroAction(
            id=self._unique_id(),
            type=action_type,
            x=0,
            y=0,
            button=MouseButton.LEFT,
            duration=1000,
            key="Space",
            jitter=True,
            comment="",
        )
        self._actions.append(action)
        self._notify()
        return action

    def remove(self, action_id: str) -> Optional[MacroAction]:
        index = self.index_of(action_id)
        if index < 0:
            return None
        removed = self._actions.pop(index)
        self._notify()
        return removed

    def update(self, action_id: str, **changes) -> Optional[MacroAction]:
        """
        Merge the given fields into an action.

        Raises:
            ValueError: if a field name is not an editable action field
        """
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown action field(s): {', '.join(sorted(unknown))}")
        action = self.get(action_id)
        if action is None:
            return None
        for name, value in changes.items():
            setattr(action, name, value)
        self._notify()
        return action

    def duplicate(self, action_id: str) -> Optional[MacroAction]:
        """Insert a copy with a fresh id right after the original."""
        index = self.index_of(action_id)
        if index < 0:
            return None
        clone = copy.deepcopy(self._actions[index])
        clone.id = self._unique_id()
        self._actions.insert(index + 1, clone)
        self._notify()
        return clone

    def move(self, action_id: str, delta: int) -> bool:
        """Swap with the neighbour `delta` positions away. Returns False if out of range."""
        index = self.index_of(action_id)
        new_index = index + delta
        if index < 0 or new_index < 0 or new_index >= len(self._actions):
            return False
        self._actions[index], self._actions[new_index] = (
            self._actions[new_index],
            self._actions[index],
        )
        self._notify()
        return True

    def move_to(self, action_id: str, where: str) -> bool:
        """Move an action to the "top" or "bottom" of the list."""
        index = self.index_of(action_id)
        if index < 0:
            return False
        action = self._actions.pop(index)
        if where == "top":
            self._actions.insert(0, action)
        else:
            self._actions.append(action)
        self._notify()
        return True

    def clear(self) -> None:
        if not self._actions:
            return
        self._actions.clear()
        self._notify()

    # Internal helpers -------------------------------------------------

    def _unique_id(self) -> str:
        action_id = new_action_id()
        while self.get(action_id) is not None:
            action_id = new_action_id()
        return action_id

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
