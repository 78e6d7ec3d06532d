"""
timesheet-export - export timesheets from a dataset file

Usage:
    timesheet-export --dataset attendance.yaml --month 2024-01 --period 1st \
        --format csc --size folio --output-dir out/

    timesheet-export --dataset attendance.yaml --month 2024-01 \
        --signature digital --signer 7 --individual

The dataset format is described in ``records/memory.py``; signers are
listed under ``signers`` with certificate/specimen paths relative to the
dataset file.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from .config import RuntimeConfig, configure_logging, get_config
from .interfaces import TimesheetExportError
from .models import ExportRequestBuilder, Layout, PaperSize, SignatureMode, Signer
from .pipeline import TimesheetExporter, enforce_subject_limit
from .records import InMemoryAttendanceStore
from .signing import PdfSigner, StaticIdentityProvider

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="timesheet-export", description="Export timesheets to PDF")
    ap.add_argument("--dataset", required=True, help="YAML or JSON attendance dataset")
    ap.add_argument("--config", help="runtime settings YAML")
    ap.add_argument("--month", required=True, help="YYYY-MM")
    ap.add_argument("--period", default="full", help="full|1st|2nd|regular|overtime|dates|range|a-b")
    ap.add_argument("--date", dest="dates", action="append", default=[], help="custom date (repeatable)")
    ap.add_argument("--format", dest="layout", default=Layout.CSC.value, choices=[v.value for v in Layout])
    ap.add_argument("--size", default=PaperSize.FOLIO.value, choices=[v.value for v in PaperSize])
    ap.add_argument("--transmittal", type=int, default=0, help="transmittal copies (0 = none)")
    ap.add_argument("--no-grouping", action="store_true", help="do not group by office")
    ap.add_argument(
        "--signature",
        default=SignatureMode.NONE.value,
        choices=[v.value for v in SignatureMode],
    )
    ap.add_argument("--signer", help="signer id from the dataset")
    ap.add_argument("--individual", action="store_true", help="one PDF per employee in a ZIP")
    ap.add_argument("--employee", dest="employees", action="append", help="employee id (default: all)")
    ap.add_argument("--output-dir", default=".", help="where to write the export")
    return ap


def load_dataset(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f) or {}


def load_signers(data: dict[str, Any], base_dir: Path) -> tuple[dict[str, Signer], StaticIdentityProvider]:
    signers: dict[str, Signer] = {}
    identities = StaticIdentityProvider()
    for item in data.get("signers", []):
        signer = Signer(
            id=str(item["id"]),
            name=item["name"],
            email=item.get("email"),
            title=item.get("title"),
        )
        signers[signer.id] = signer
        if item.get("certificate") and item.get("specimen"):
            identities.register(
                signer.id,
                StaticIdentityProvider.load(
                    base_dir / item["certificate"],
                    base_dir / item["specimen"],
                    password=item.get("password", ""),
                    owner_id=signer.id,
                    email=signer.email,
                ),
            )
    return signers, identities


def run(args: argparse.Namespace, config: RuntimeConfig) -> Path:
    dataset_path = Path(args.dataset)
    data = load_dataset(dataset_path)
    store, employees = InMemoryAttendanceStore.from_dataset(data)
    signers, identities = load_signers(data, dataset_path.parent)

    if args.employees:
        wanted = set(args.employees)
        employees = [employee for employee in employees if employee.id in wanted]

    builder = (
        ExportRequestBuilder()
        .employee(employees[0] if len(employees) == 1 else employees)
        .month(args.month)
        .dates(args.dates)
        .period(args.period)
        .layout(args.layout)
        .paper_size(args.size)
        .transmittal(args.transmittal)
        .grouping(None if args.no_grouping else "offices")
        .signature(args.signature)
        .individual(args.individual)
    )
    if args.signer:
        builder.user(signers.get(args.signer))
    request = builder.build()

    enforce_subject_limit(request, config)

    signer = PdfSigner.from_config(config) if request.signature_mode.digital else None
    exporter = TimesheetExporter(store, signer=signer, identities=identities, config=config)
    result = exporter.download(request, download=False)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / result.filename
    output_path.write_bytes(result.content)
    return output_path


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = RuntimeConfig.from_yaml(args.config) if args.config else get_config()
    configure_logging(config)

    try:
        output_path = run(args, config)
    except TimesheetExportError as e:
        logger.error(f"Export failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
