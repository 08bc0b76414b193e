"""
Per-message decision for a one-sided clear.

A message stays in the store until both participants have cleared it; the
second clear removes it.
"""
import enum

from app.models.message import Message


class ClearAction(str, enum.Enum):
    """What clearing does to a single message."""
    NOOP = "noop"
    MARK = "mark"
    DELETE = "delete"


def evaluate_message(message: Message, caller_uid: str, other_uid: str) -> ClearAction:
    """
    Decide how clearing as ``caller_uid`` affects ``message``.

    - caller already cleared, other has not: NOOP
    - caller already cleared, other has too: DELETE (repairs a message both
      sides cleared but that was never removed)
    - caller not yet cleared, other has not: MARK (add caller to deletedFor)
    - caller not yet cleared, other has: DELETE

    Args:
        message: Message being cleared
        caller_uid: uid of the user clearing the chat
        other_uid: uid of the other participant

    Returns:
        ClearAction for the message
    """
    cleared_by = set(message.deleted_for)

    if caller_uid in cleared_by:
        return ClearAction.DELETE if other_uid in cleared_by else ClearAction.NOOP

    cleared_by.add(caller_uid)
    if other_uid in cleared_by:
        return ClearAction.DELETE
    return ClearAction.MARK
