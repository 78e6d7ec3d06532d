"""
pytest configuration and shared fixtures

External processes never run in unit tests:
- FakeRenderer returns blank PDFs built with PyPDF2
- FakeRunner stands in for subprocess.run in the signer

Usage:
    def test_something(exporter, employees):
        request = ExportRequestBuilder().employee(employees).month("2024-01").build()
"""

from __future__ import annotations

import io
import subprocess
import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Generator

import pytest
from PyPDF2 import PdfWriter

from timesheet_export.config import LayoutSpec, RuntimeConfig, load_layouts
from timesheet_export.interfaces import IDocumentRenderer, RenderFailure
from timesheet_export.models import (
    Employee,
    LogState,
    PaperSize,
    Signer,
    SignerIdentity,
    TimeLog,
    Timesheet,
    Timetable,
)
from timesheet_export.pipeline import TimesheetExporter
from timesheet_export.records import InMemoryAttendanceStore
from timesheet_export.signing import PdfSigner, StaticIdentityProvider

COVER_WIDTH = 300
BODY_WIDTH = 600


def make_pdf(pages: int = 1, width: float = BODY_WIDTH, height: float = 800) -> bytes:
    """Blank PDF with the given number of pages"""
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=width, height=height)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class FakeRenderer(IDocumentRenderer):
    """Records render calls; covers are COVER_WIDTH wide, bodies BODY_WIDTH"""

    COVER_WIDTH = COVER_WIDTH
    BODY_WIDTH = BODY_WIDTH

    def __init__(self, fail_after: int | None = None, config: RuntimeConfig | None = None):
        self.config = config
        self.calls: list[tuple[str, PaperSize, dict[str, Any]]] = []
        self.fail_after = fail_after

    def render(self, layout_name: str, paper_size: PaperSize, context: dict[str, Any]) -> bytes:
        if self.fail_after is not None and len(self.calls) >= self.fail_after:
            raise RenderFailure("renderer exited with status 1")
        self.calls.append((layout_name, paper_size, context))
        width = COVER_WIDTH if "transmittal" in layout_name else BODY_WIDTH
        pages = max(1, len(context.get("timesheets") or []))
        return make_pdf(pages, width=width)

    @property
    def layouts(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeRunner:
    """subprocess.run stand-in for the signing tool"""

    def __init__(self, results: list[tuple[int, str]] | None = None):
        self.results = list(results or [])
        self.commands: list[list[str]] = []
        self.cwds: list[Path] = []
        self.workspace_files: list[list[str]] = []
        self.kwargs: list[dict[str, Any]] = []

    def __call__(self, command: list[str], cwd: str | None = None, **kwargs: Any) -> subprocess.CompletedProcess:
        self.commands.append(list(command))
        self.cwds.append(Path(cwd))
        self.workspace_files.append(sorted(p.name for p in Path(cwd).iterdir()))
        self.kwargs.append(kwargs)

        returncode, stderr = self.results.pop(0) if self.results else (0, "")
        if returncode == 0:
            output = Path(command[-2])
            output.write_bytes(Path(command[-3]).read_bytes() + b"%signed\n")
        return subprocess.CompletedProcess(command, returncode, stdout="", stderr=stderr)


# ============================================================================
# Configuration fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Temporary directory"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def runtime_config(temp_dir: Path) -> RuntimeConfig:
    """Settings with scratch/signing dirs under a temp dir"""
    config = RuntimeConfig()
    config.storage.scratch_dir = temp_dir / "scratch"
    config.storage.signing_dir = temp_dir / "signing"
    return config


@pytest.fixture(scope="session")
def layouts() -> LayoutSpec:
    """Packaged layout registry"""
    return load_layouts()


# ============================================================================
# Attendance fixtures
# ============================================================================

@pytest.fixture
def employees() -> list[Employee]:
    """Three employees across two offices, deliberately interleaved"""
    return [
        Employee(id="1", name="Jane Doe", last_name="Doe", offices=["HR"]),
        Employee(id="2", name="John Smith", last_name="Smith", offices=["ICT"]),
        Employee(id="3", name="Mary Roe", last_name="Roe", offices=["HR"]),
    ]


def _timetables(month: date) -> list[Timetable]:
    rows = []
    day = month
    while day.month == month.month:
        weekend = day.weekday() >= 5
        rows.append(
            Timetable(
                date=day,
                present=not weekend or day.day == 6,
                regular=not weekend,
                overtime=30 if day.day in (10, 20) else 0,
            )
        )
        day += timedelta(days=1)
    return rows


@pytest.fixture
def store(employees: list[Employee]) -> InMemoryAttendanceStore:
    """January 2024 timesheets for Jane and John (Mary has none); logs for all"""
    month = date(2024, 1, 1)
    store = InMemoryAttendanceStore()
    for employee in employees[:2]:
        store.add_timesheet(Timesheet(employee=employee, month=month, timetables=_timetables(month)))
    for employee in employees:
        for day in range(1, 32):
            store.add_time_log(
                employee.id,
                TimeLog(time=datetime(2024, 1, day, 8, 0), state=LogState.IN, scanner="lobby"),
            )
            store.add_time_log(
                employee.id,
                TimeLog(time=datetime(2024, 1, day, 17, 0), state=LogState.OUT, scanner="lobby"),
            )
    store.add_time_log("1", TimeLog(time=datetime(2023, 12, 31, 22, 0), state=LogState.IN))
    store.add_time_log("1", TimeLog(time=datetime(2024, 2, 1, 6, 0), state=LogState.OUT))
    return store


# ============================================================================
# Signing fixtures
# ============================================================================

@pytest.fixture
def signer_user() -> Signer:
    return Signer(id="7", name="Ana Cruz", email="ana.cruz@example.gov.ph", title="HR Officer")


@pytest.fixture
def identity() -> SignerIdentity:
    return SignerIdentity(
        owner_id="7",
        certificate=b"PFX-BYTES",
        specimen=b"WEBP-BYTES",
        password="s3cret",
        email="ana.cruz@example.gov.ph",
    )


@pytest.fixture
def identities(signer_user: Signer, identity: SignerIdentity) -> StaticIdentityProvider:
    return StaticIdentityProvider({signer_user.id: identity})


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def pdf_signer(fake_runner: FakeRunner, temp_dir: Path) -> PdfSigner:
    return PdfSigner(
        ["pyhanko"],
        timestamp_url="http://tsa.example.test",
        workspace_root=temp_dir / "signing",
        runner=fake_runner,
    )


# ============================================================================
# Exporter fixtures
# ============================================================================

@pytest.fixture
def pdf_factory():
    """Blank PDF builder: pdf_factory(pages, width=...)"""
    return make_pdf


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def renderer_factory():
    """FakeRenderer class, e.g. renderer_factory(fail_after=1)"""
    return FakeRenderer


@pytest.fixture
def exporter(
    store: InMemoryAttendanceStore,
    renderer: FakeRenderer,
    runtime_config: RuntimeConfig,
    layouts: LayoutSpec,
) -> TimesheetExporter:
    return TimesheetExporter(store, renderer=renderer, config=runtime_config, layouts=layouts)
