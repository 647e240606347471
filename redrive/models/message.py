from typing import Optional
from pydantic import BaseModel, Field


class Message(BaseModel):
    """
    One delivery pulled from a queue.

    identifier is unique per delivery and is what gets logged and deleted;
    receipt_handle is the transport's own deletion token, when it has one.
    """
    identifier: str
    content: str
    attributes: dict[str, str] = Field(default_factory=dict)
    receipt_handle: Optional[str] = None


class ProcessorStats(BaseModel):
    """Snapshot of a queue processor's running totals.

    receive_errors counts failed get_message calls. Those never reach
    received, so they are not part of failed either.
    """
    received: int = 0
    sent: int = 0
    failed: int = 0
    receive_errors: int = 0
