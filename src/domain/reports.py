"""
Report & dispute engine - Abuse reports and their resolution.

Each identity may report a name once. A moderator or admin resolves a
report exactly once; the adjudication outcome (upheld or rejected) is
recorded on the report and in the DisputeResolved event but does not by
itself change the reported domain or the reporter.
"""

from dataclasses import dataclass, replace

from .context import CallContext
from .exceptions import AlreadyReported, AlreadyResolved, InvalidData, NotFound
from .ports import RegistryStore, Report, Role
from .registry import DomainRegistry
from .roles import RoleStore
from .validation import MAX_DETAILS_BYTES, MAX_REASON_CODE, MIN_REASON_CODE, require_name, require_text


@dataclass
class ReportEngine:
    domains: DomainRegistry
    roles: RoleStore

    def report_domain(self, ctx: CallContext, name: str, reason_code: int, details: str) -> Report:
        """
        File the caller's report against name.

        Raises:
            InvalidData: Empty or oversized details, reason code out of range
            NotFound: name is not registered
            AlreadyReported: caller already reported name
        """
        require_text(details, "details", MAX_DETAILS_BYTES)
        if isinstance(reason_code, bool) or not isinstance(reason_code, int):
            raise InvalidData("reason_code must be an integer")
        if not MIN_REASON_CODE <= reason_code <= MAX_REASON_CODE:
            raise InvalidData(f"reason_code outside [{MIN_REASON_CODE}, {MAX_REASON_CODE}]")

        record = self.domains.require_domain(ctx.store, name)
        if ctx.store.get_report(record.name, ctx.caller) is not None:
            raise AlreadyReported(record.name)

        report = Report(
            name=record.name,
            reporter=ctx.caller,
            reason_code=reason_code,
            details=details,
            reported_at=ctx.height,
        )
        ctx.store.insert_report(report)
        ctx.emit("DomainReported", domain=record.name, reporter=ctx.caller, reason_code=reason_code)
        return report

    def get_report(self, store: RegistryStore, name: str, reporter: str) -> Report:
        report = store.get_report(require_name(name), reporter)
        if report is None:
            raise NotFound(f"no report by {reporter} on {name}")
        return report

    def get_report_status(self, store: RegistryStore, name: str, reporter: str) -> bool:
        return self.get_report(store, name, reporter).resolved

    def resolve_dispute(self, ctx: CallContext, name: str, reporter: str, status: bool) -> Report:
        """
        Close a report (moderator or admin only).

        Args:
            status: Adjudication outcome, True when the report is upheld

        Raises:
            NoPermission: Caller lacks the moderator role
            NotFound: No such report
            AlreadyResolved: The report was already resolved
        """
        self.roles.require(ctx.store, ctx.caller, Role.MODERATOR)
        report = self.get_report(ctx.store, name, reporter)
        if report.resolved:
            raise AlreadyResolved(f"report by {reporter} on {report.name}")

        report = replace(report, resolved=True, upheld=bool(status), resolved_at=ctx.height)
        ctx.store.update_report(report)
        ctx.emit("DisputeResolved", domain=report.name, reporter=reporter, status=bool(status))
        return report

    def list_reports(
        self, store: RegistryStore, caller: str, name: str, unresolved_only: bool = False
    ) -> list[Report]:
        """List reports filed against name (moderator or admin only)."""
        self.roles.require(store, caller, Role.MODERATOR)
        record = self.domains.require_domain(store, name)
        reports = store.list_reports(record.name)
        if unresolved_only:
            reports = [report for report in reports if not report.resolved]
        return reports
