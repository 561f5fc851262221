"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Tables/panels are reused by `lookup`, `tax` and `registry`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from companyinfo.core.domain.models import (
    ApplicationError,
    CombinedCompanyInfo,
    RegistryFound,
    RegistryNotFound,
    TaxRecord,
)


def print_banner(console: Console) -> None:
    title = Text("companyinfo", style="bold cyan")
    subtitle = Text("Tax authority • Business registry", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_tax_panel(record: TaxRecord | None) -> Panel:
    if record is None:
        return Panel(Text("No data", style="dim"), title="Revenue service", border_style="yellow")

    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column(style="white")
    for label, value in (
        ("ID", record.id),
        ("Name", record.name),
        ("Entity type", record.entity_type),
        ("Status", record.status),
        ("Created", record.create_date),
        ("Registration #", record.registration_number),
        ("Registration date", record.registration_date),
        ("Address", record.address),
    ):
        table.add_row(label, value or "-")

    for director in record.directors:
        table.add_row("Director", f"{director.full_name} ({director.personal_id}) {director.role}".strip())
    for founder in record.founders:
        share = "?" if founder.ownership_percentage is None else f"{founder.ownership_percentage}%"
        table.add_row("Founder", f"{founder.full_name} ({founder.personal_id}) {share}")

    return Panel(table, title="Revenue service", border_style="green")


def build_registry_panel(record: RegistryFound | RegistryNotFound | None) -> Panel:
    if record is None:
        return Panel(Text("Unavailable", style="red"), title="Business registry", border_style="red")
    if isinstance(record, RegistryNotFound):
        return Panel(Text("Not found", style="dim"), title="Business registry", border_style="yellow")

    meta = record.entity_metadata
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column(style="white")
    table.add_row("Handle", record.internal_handle)
    table.add_row("Identification code", meta.identification_code or "-")
    table.add_row("Name", meta.name or "-")
    table.add_row("Legal form", meta.legal_form or "-")
    table.add_row("Registered", meta.registration_date or "-")
    table.add_row("Status", meta.status_text or "-")
    if meta.reporting_link:
        table.add_row("Reporting", meta.reporting_link)
    for key, link in sorted(meta.documents.items()):
        table.add_row(key, link)

    return Panel(table, title="Business registry", border_style="green")


def build_applications_table(record: RegistryFound) -> Table:
    table = Table(title="Applications")
    table.add_column("App ID", style="cyan", no_wrap=True)
    table.add_column("Registration #", style="white")
    table.add_column("Service", style="white")
    table.add_column("Status", style="green")
    table.add_column("Date", style="magenta")
    table.add_column("Details", style="dim")

    for app in record.applications:
        if isinstance(app.details, ApplicationError):
            details = Text(app.details.error, style="red")
        else:
            d = app.details
            details = Text(
                f"{len(d.prepared_documents)} docs, {len(d.status_history)} statuses, "
                f"{len(d.scanned_documents)} scans, {len(d.payments)} payments"
            )
        table.add_row(app.app_id, app.registration_number, app.service_type, app.status, app.date, details)
    return table


def print_combined(console: Console, info: CombinedCompanyInfo) -> None:
    console.print(build_tax_panel(info.revenue_service_info))
    print_registry(console, info.entrepreneurial_registry_info)
    console.print(f"[dim]Last updated: {info.last_updated.isoformat()}[/dim]")


def print_registry(console: Console, record: RegistryFound | RegistryNotFound | None) -> None:
    console.print(build_registry_panel(record))
    if isinstance(record, RegistryFound) and record.applications:
        console.print(build_applications_table(record))
