"""Client-side transcript state for the chat page."""

import uuid
from dataclasses import dataclass, field

from deepchat.models.schemas import Role


@dataclass
class ChatEntry:
    """A message as the page holds it; ``id`` is only a rendering key."""

    role: Role
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class Transcript:
    """Ordered conversation held in page memory.

    At most one assistant message is pending at a time; it receives stream
    chunks until ``finish`` or ``discard_pending`` is called.
    """

    def __init__(self) -> None:
        self.messages: list[ChatEntry] = []
        self.pending: ChatEntry | None = None

    @property
    def is_streaming(self) -> bool:
        return self.pending is not None

    def append(self, role: Role, content: str) -> ChatEntry:
        entry = ChatEntry(role=role, content=content)
        self.messages.append(entry)
        return entry

    def start_assistant(self) -> ChatEntry:
        """Append an empty assistant message that stream chunks will fill."""
        self.pending = self.append("assistant", "")
        return self.pending

    def append_chunk(self, text: str) -> None:
        if self.pending is None:
            raise RuntimeError("no assistant message is streaming")
        self.pending.content += text

    def finish(self) -> ChatEntry | None:
        """Mark the pending assistant message complete and return it."""
        entry, self.pending = self.pending, None
        return entry

    def discard_pending(self) -> None:
        """Drop the pending assistant message if nothing was streamed into it."""
        if self.pending is not None and not self.pending.content:
            self.messages.remove(self.pending)
        self.pending = None

    def to_payload(self) -> list[dict[str, str]]:
        """Return the transcript in the relay's request format."""
        return [
            {"role": m.role, "content": m.content}
            for m in self.messages
            if m is not self.pending
        ]

    def clear(self) -> None:
        self.messages.clear()
        self.pending = None
