#!/usr/bin/env python3
"""
Unified CLI for predictive vehicle maintenance.

Commands (target is a vehicle YAML file):
  status       - Show estimated odometer, next milestone and checklist
  history      - View maintenance history
  log          - Add a new maintenance record
  certificate  - Issue a maintenance certificate

Commands (target is a vehicles directory):
  dashboard    - Summarize every vehicle
  verify       - Look up an issued certificate by id
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from autotrace import (
    MaintenanceRecord,
    SuggestionSummary,
    Vehicle,
    find_certificate,
    issue_certificate,
    load_vehicle,
    load_vehicles,
    render_certificate,
    save_certificate,
    save_maintenance_record,
)
from autotrace.config import get_settings
from autotrace.dates import format_day, parse_timestamp, utc_now
from autotrace.logging_utils import get_logger, setup_logging

logger = get_logger("maint")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_status(overdue: bool) -> str:
    """Format an overdue flag for display."""
    return "OVERDUE" if overdue else "ok"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_now(value: Optional[str]) -> datetime:
    """Explicit --now timestamp, or the current time."""
    return parse_timestamp(value) if value else utc_now()


# =============================================================================
# Status command
# =============================================================================


def make_upcoming_table(summary: SuggestionSummary) -> List[List[str]]:
    """Convert the upcoming milestone list to table rows."""
    rows = []
    for item in summary.upcoming:
        marker = "->" if item.km_mark == summary.next_maintenance_km else ""
        rows.append(
            [
                marker,
                format_km(item.km_mark),
                format_status(item.overdue),
                "; ".join(item.checklist),
            ]
        )
    return rows


def cmd_status(args):
    """Show the maintenance suggestion for a vehicle."""
    vehicle = load_vehicle(args.target)
    now = parse_now(args.now)
    summary = vehicle.suggestions(now)

    print(f"Vehicle: {vehicle.name}")
    print(f"Category: {vehicle.category.value}")
    print(
        f"Estimated odometer: {format_km(summary.estimated_current_km)} km "
        f"(as of {format_day(now)}, {format_km(summary.monthly_average_km)} km/month)"
    )
    print(f"Next maintenance: {format_km(summary.next_maintenance_km)} km")
    print(f"Remaining: {format_km(summary.km_to_next)} km")
    if summary.estimated_due_date is not None:
        print(f"Estimated due date: {format_day(summary.estimated_due_date)}")
    print(f"Status: {'OVERDUE' if summary.overdue else 'Up to date'}")
    print()

    print("Checklist:")
    for item in summary.checklist:
        print(f"  * {item}")
    print()

    headers = ["", "Milestone (km)", "Status", "Checklist"]
    print(tabulate(make_upcoming_table(summary), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(entries: List[MaintenanceRecord]) -> List[List[str]]:
    """Convert maintenance records to table rows."""
    rows = []
    for entry in entries:
        rows.append(
            [
                format_day(entry.service_date),
                format_km(entry.odometer),
                entry.service_type or "-",
                entry.workshop or "-",
                truncate(entry.notes),
            ]
        )
    return rows


def cmd_history(args):
    """View maintenance history."""
    vehicle = load_vehicle(args.target)

    if args.sort == "odometer":
        entries = sorted(
            vehicle.maintenances, key=lambda m: m.odometer, reverse=not args.asc
        )
    else:
        entries = vehicle.get_maintenances_sorted(reverse=not args.asc)

    if args.since:
        since = parse_timestamp(args.since)
        entries = [e for e in entries if e.service_date >= since]

    last = vehicle.last_maintenance

    print(f"Vehicle: {vehicle.name}")
    if last:
        print(f"Last maintenance: {format_day(last.service_date)} @ {format_km(last.odometer)} km")
    print(f"Total maintenances: {len(vehicle.maintenances)}")
    if args.since:
        print(f"Showing: {len(entries)} (filtered)")
    print()

    if not entries:
        print("No maintenance records found.")
        return 0

    headers = ["Date", "Odometer", "Service", "Workshop", "Notes"]
    print(tabulate(make_history_table(entries), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Log command
# =============================================================================


def cmd_log(args):
    """Add a new maintenance record."""
    if args.odometer < 0:
        print("Error: --odometer must not be negative")
        return 1

    service_date = parse_timestamp(args.date) if args.date else utc_now()
    record = MaintenanceRecord(
        odometer=args.odometer,
        service_date=service_date,
        service_type=args.service_type,
        workshop=args.workshop,
        notes=args.notes,
    )

    print(f"Adding maintenance record to {args.target}:")
    print(f"  Service:  {record.service_type}")
    print(f"  Date:     {format_day(record.service_date)}")
    print(f"  Odometer: {format_km(record.odometer)} km")
    if record.workshop:
        print(f"  Workshop: {record.workshop}")
    if record.notes:
        print(f"  Notes:    {record.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_maintenance_record(args.target, record)
    print("Record saved.")

    return 0


# =============================================================================
# Certificate command
# =============================================================================


def cmd_certificate(args):
    """Issue a maintenance certificate."""
    vehicle = load_vehicle(args.target)
    now = utc_now()
    summary = vehicle.suggestions(now)
    certificate = issue_certificate(vehicle, summary, now)
    document = render_certificate(vehicle, summary, certificate)

    if args.output:
        args.output.write_text(document)
        print(f"Certificate written to {args.output}")
    else:
        print(document)

    if args.dry_run:
        print("(dry run - certificate not recorded)")
        return 0

    save_certificate(args.target, certificate)
    print(f"Certificate {certificate.id} recorded.")

    return 0


# =============================================================================
# Dashboard command
# =============================================================================


def make_dashboard_table(vehicles: List[Vehicle], now: datetime) -> List[List[str]]:
    """One row per vehicle with its next milestone and status."""
    rows = []
    for vehicle in vehicles:
        entry = vehicle.dashboard_entry(now)
        last = vehicle.last_maintenance
        rows.append(
            [
                entry["vehicleId"],
                vehicle.name,
                entry["totalMaintenances"],
                format_day(last.service_date) if last else "-",
                format_km(entry["nextMaintenanceKm"]),
                format_status(entry["overdue"]),
            ]
        )
    return rows


def cmd_dashboard(args):
    """Summarize every vehicle in a directory."""
    vehicles = load_vehicles(args.target)
    if not vehicles:
        print(f"No vehicle files found in {args.target}")
        return 0

    now = parse_now(args.now)
    overdue = sum(1 for v in vehicles if v.suggestions(now).overdue)

    print(f"Vehicles: {len(vehicles)}")
    print(f"Overdue: {overdue}")
    print()

    headers = ["ID", "Vehicle", "Services", "Last Service", "Next (km)", "Status"]
    print(tabulate(make_dashboard_table(vehicles, now), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Verify command
# =============================================================================


def cmd_verify(args):
    """Look up an issued certificate by id."""
    found = find_certificate(args.target, args.certificate_id)
    if found is None:
        print(f"Error: Certificate not found: {args.certificate_id}")
        return 1

    vehicle, certificate = found
    print(f"Certificate: {certificate.id}")
    print(f"Vehicle:     {vehicle.name}")
    print(f"Issued at:   {format_day(certificate.generated_at)}")
    print(f"Services:    {certificate.maintenance_count}")
    print(f"Last:        {format_day(certificate.last_maintenance_date)}")
    print(f"Status:      {'Overdue' if certificate.overdue else 'Up to date'}")

    return 0


# =============================================================================
# Main
# =============================================================================

FILE_COMMANDS = {"status", "history", "log", "certificate"}
DIRECTORY_COMMANDS = {"dashboard", "verify"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Predictive vehicle maintenance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s vehicles/abc1d23.yaml status
  %(prog)s vehicles/abc1d23.yaml status --now 2025-06-01
  %(prog)s vehicles/abc1d23.yaml history --since 2024-01-01
  %(prog)s vehicles/abc1d23.yaml log "Oil change" \\
      --odometer 5200 --workshop "Main Street Garage"
  %(prog)s vehicles/abc1d23.yaml certificate
  %(prog)s vehicles dashboard
  %(prog)s vehicles verify 0f6b2f4e-...
""",
    )
    parser.add_argument(
        "target",
        type=Path,
        help="Vehicle YAML file, or vehicles directory for dashboard/verify",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show log output (default: warnings only)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    status_parser = subparsers.add_parser(
        "status", help="Show estimated odometer, next milestone and checklist"
    )
    status_parser.add_argument(
        "--now",
        type=str,
        help="Evaluate as of this date/time (ISO-8601, default: now)",
    )

    history_parser = subparsers.add_parser("history", help="View maintenance history")
    history_parser.add_argument(
        "--since",
        type=str,
        help="Show only records since date (YYYY-MM-DD)",
    )
    history_parser.add_argument(
        "--sort",
        choices=["date", "odometer"],
        default="date",
        help="Sort order (default: date)",
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort ascending instead of descending",
    )

    log_parser = subparsers.add_parser("log", help="Add a new maintenance record")
    log_parser.add_argument(
        "service_type",
        type=str,
        help="Service performed (e.g., 'Oil change')",
    )
    log_parser.add_argument(
        "--odometer",
        type=int,
        required=True,
        help="Odometer reading (km) at time of service",
    )
    log_parser.add_argument(
        "--workshop",
        type=str,
        help="Where the service was done (e.g., 'self', 'Dealer')",
    )
    log_parser.add_argument(
        "--date",
        type=str,
        help="Service date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument(
        "--notes",
        type=str,
        help="Notes about the service",
    )
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    certificate_parser = subparsers.add_parser(
        "certificate", help="Issue a maintenance certificate"
    )
    certificate_parser.add_argument(
        "--output",
        type=Path,
        help="Write the certificate to a file instead of stdout",
    )
    certificate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render without recording the certificate",
    )

    dashboard_parser = subparsers.add_parser(
        "dashboard", help="Summarize every vehicle in the directory"
    )
    dashboard_parser.add_argument(
        "--now",
        type=str,
        help="Evaluate as of this date/time (ISO-8601, default: now)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Look up an issued certificate by id"
    )
    verify_parser.add_argument("certificate_id", type=str, help="Certificate id")

    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    setup_logging(get_settings().log_level if args.verbose else "WARNING")

    if args.command in FILE_COMMANDS and not args.target.is_file():
        print(f"Error: File not found: {args.target}")
        return 1
    if args.command in DIRECTORY_COMMANDS and not args.target.is_dir():
        print(f"Error: Directory not found: {args.target}")
        return 1

    for option in ("now", "since", "date"):
        value = getattr(args, option, None)
        if not value:
            continue
        try:
            parse_timestamp(value)
        except (ValueError, OverflowError):
            print(f"Error: Invalid date: {value}")
            return 1

    logger.debug("Running %s on %s", args.command, args.target)

    if args.command == "status":
        return cmd_status(args)
    elif args.command == "history":
        return cmd_history(args)
    elif args.command == "log":
        return cmd_log(args)
    elif args.command == "certificate":
        return cmd_certificate(args)
    elif args.command == "dashboard":
        return cmd_dashboard(args)
    elif args.command == "verify":
        return cmd_verify(args)

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
