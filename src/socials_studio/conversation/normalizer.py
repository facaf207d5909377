"""Conversation normalization before model calls.

Chat APIs require strictly alternating user/assistant turns. Stored
history can break that (a failed reply, a context turn followed by the
user's first message), so adjacent turns with the same role are merged
with a blank line between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..constants import MessageRole


@dataclass(frozen=True)
class Turn:
    """One conversation turn sent to the model."""

    role: MessageRole
    content: str

    def to_message(self) -> dict[str, str]:
        """OpenAI chat message form."""
        return {"role": MessageRole(self.role).value, "content": self.content}


TURN_SEPARATOR = "\n\n"


def normalize_turns(turns: Iterable[Turn]) -> list[Turn]:
    """Merge consecutive same-role turns.

    Deterministic and order preserving: no content is dropped and no two
    adjacent turns in the result share a role.
    """
    merged: list[Turn] = []
    for turn in turns:
        role = MessageRole(turn.role)
        if merged and merged[-1].role == role:
            previous = merged[-1]
            merged[-1] = Turn(role=role, content=f"{previous.content}{TURN_SEPARATOR}{turn.content}")
        else:
            merged.append(Turn(role=role, content=turn.content))
    return merged
