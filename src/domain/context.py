"""
Call context - Everything one registry operation needs from the host.

A CallContext bundles the authenticated caller, the height assigned to the
call and the store of the current unit of work. Components emit events
through it so that the event is written in the same unit of work as the
state transition it describes.
"""

from dataclasses import dataclass, field
from typing import Any

from .ports import Event, RegistryStore


@dataclass
class CallContext:
    store: RegistryStore
    caller: str
    height: int
    events: list[Event] = field(default_factory=list)

    def emit(self, name: str, **payload: Any) -> Event:
        event = Event(height=self.height, name=name, caller=self.caller, payload=payload)
        self.store.append_event(event)
        self.events.append(event)
        return event
