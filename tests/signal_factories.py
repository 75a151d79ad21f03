"""Signal builders shared by the matcher, scorer and detector tests."""

from pm_copilot.models import Provenance, Signal, SignalAttributes


def make_reactive(
    signal_id,
    text,
    created_at=None,
    tags=(),
    thread_count=0,
    title=None,
):
    """Reactive signal helper."""
    return Signal(
        id=f"hs-{signal_id}",
        provenance=Provenance.REACTIVE,
        title=title if title is not None else text[:40],
        text=text.lower(),
        created_at=created_at,
        attributes=SignalAttributes(tags=list(tags), thread_count=thread_count),
    )


def make_proactive(
    signal_id,
    text,
    votes=0,
    comments_count=0,
    created_at=None,
    title=None,
):
    """Proactive signal helper."""
    return Signal(
        id=f"pl-{signal_id}",
        provenance=Provenance.PROACTIVE,
        title=title if title is not None else text[:40],
        text=text.lower(),
        created_at=created_at,
        attributes=SignalAttributes(votes=votes, comments_count=comments_count),
    )
