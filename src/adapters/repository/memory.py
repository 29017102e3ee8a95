"""
In-memory repository adapter - Implements RegistryRepository protocol.

Keeps every store in plain dicts owned by one repository object. A unit
of work holds a process-wide lock for its whole duration, so calls are
serialized in the order they acquire it.

Writes are staged in a per-unit-of-work overlay and reads fall through to
the live dicts, so a unit of work costs only what it touches. The overlay
is merged into the live dicts when the unit of work exits without an
exception and dropped otherwise.

Used for tests, demos and single-process deployments.
"""

import bisect
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from src.domain.ports import DomainRecord, Event, Report, Review, Role


class _InMemoryStore:
    """Write overlay over the repository state for one unit of work."""

    def __init__(self, repository: "InMemoryRegistryRepository") -> None:
        self._live = repository
        self.height = repository._height
        self.domains: dict[str, DomainRecord] = {}
        self.roles: dict[str, Role] = {}  # Role.NONE marks a removal
        self.reviews: dict[tuple[str, str], Review] = {}
        self.reports: dict[tuple[str, str], Report] = {}
        self.events: list[Event] = []

    def next_height(self) -> int:
        self.height += 1
        return self.height

    def get_domain(self, name: str) -> DomainRecord | None:
        if name in self.domains:
            return self.domains[name]
        return self._live._domains.get(name)

    def list_domains(self, owner: str | None = None) -> list[DomainRecord]:
        if owner is None:
            merged = {**self._live._domains, **self.domains}
        else:
            merged = {name: self._live._domains[name] for name in self._live._owned.get(owner, ())}
            merged.update(self.domains)
        records = [record for record in merged.values() if owner is None or record.owner == owner]
        return sorted(records, key=lambda record: record.name)

    def insert_domain(self, record: DomainRecord) -> None:
        if self.get_domain(record.name) is not None:
            raise KeyError(f"duplicate domain: {record.name}")
        self.domains[record.name] = record

    def update_domain(self, record: DomainRecord) -> None:
        if self.get_domain(record.name) is None:
            raise KeyError(f"unknown domain: {record.name}")
        self.domains[record.name] = record

    def get_role(self, identity: str) -> Role:
        if identity in self.roles:
            return self.roles[identity]
        return self._live._roles.get(identity, Role.NONE)

    def set_role(self, identity: str, role: Role) -> None:
        self.roles[identity] = role

    def has_admin(self) -> bool:
        if Role.ADMIN in self.roles.values():
            return True
        return any(
            role == Role.ADMIN and identity not in self.roles
            for identity, role in self._live._roles.items()
        )

    def get_review(self, name: str, reviewer: str) -> Review | None:
        if (name, reviewer) in self.reviews:
            return self.reviews[(name, reviewer)]
        return self._live._reviews.get(name, {}).get(reviewer)

    def insert_review(self, review: Review) -> None:
        key = (review.name, review.reviewer)
        if self.get_review(*key) is not None:
            raise KeyError(f"duplicate review: {key}")
        self.reviews[key] = review

    def list_reviews(self, name: str) -> list[Review]:
        merged = dict(self._live._reviews.get(name, {}))
        merged.update({reviewer: r for (domain, reviewer), r in self.reviews.items() if domain == name})
        return sorted(merged.values(), key=lambda review: (review.reviewed_at, review.reviewer))

    def get_report(self, name: str, reporter: str) -> Report | None:
        if (name, reporter) in self.reports:
            return self.reports[(name, reporter)]
        return self._live._reports.get(name, {}).get(reporter)

    def insert_report(self, report: Report) -> None:
        key = (report.name, report.reporter)
        if self.get_report(*key) is not None:
            raise KeyError(f"duplicate report: {key}")
        self.reports[key] = report

    def update_report(self, report: Report) -> None:
        key = (report.name, report.reporter)
        if self.get_report(*key) is None:
            raise KeyError(f"unknown report: {key}")
        self.reports[key] = report

    def list_reports(self, name: str) -> list[Report]:
        merged = dict(self._live._reports.get(name, {}))
        merged.update({reporter: r for (domain, reporter), r in self.reports.items() if domain == name})
        return sorted(merged.values(), key=lambda report: (report.reported_at, report.reporter))

    def append_event(self, event: Event) -> None:
        self.events.append(event)

    def list_events(self, after_height: int = 0, limit: int = 100) -> list[Event]:
        # The live log is append-only in height order
        live = self._live._events
        start = bisect.bisect_right(live, after_height, key=lambda event: event.height)
        events = live[start : start + limit]
        events += [event for event in self.events if event.height > after_height]
        return events[:limit]


class InMemoryRegistryRepository:
    """
    Implements RegistryRepository protocol with process-local dicts.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Reviews and reports are indexed by domain name, and domains by owner,
    so per-domain and per-owner reads do not scan the whole registry.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._height = 0
        self._domains: dict[str, DomainRecord] = {}
        self._owned: dict[str, set[str]] = {}
        self._roles: dict[str, Role] = {}
        self._reviews: dict[str, dict[str, Review]] = {}
        self._reports: dict[str, dict[str, Report]] = {}
        self._events: list[Event] = []

    @contextmanager
    def unit_of_work(self) -> Iterator[_InMemoryStore]:
        """
        Serialize on the repository lock and merge staged writes on success.

        Nested units of work are not supported: the inner one would not see
        the outer one's staged writes.
        """
        with self._lock:
            store = _InMemoryStore(self)
            yield store
            self._commit(store)

    def _commit(self, store: _InMemoryStore) -> None:
        self._height = store.height
        for name, record in store.domains.items():
            previous = self._domains.get(name)
            if previous is not None and previous.owner != record.owner:
                self._owned[previous.owner].discard(name)
            self._domains[name] = record
            self._owned.setdefault(record.owner, set()).add(name)
        for identity, role in store.roles.items():
            if role == Role.NONE:
                self._roles.pop(identity, None)
            else:
                self._roles[identity] = role
        for (name, reviewer), review in store.reviews.items():
            self._reviews.setdefault(name, {})[reviewer] = review
        for (name, reporter), report in store.reports.items():
            self._reports.setdefault(name, {})[reporter] = report
        self._events.extend(store.events)
