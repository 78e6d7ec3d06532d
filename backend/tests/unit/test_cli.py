"""
Command line unit tests (rendering goes through FakeRenderer)

Run after changing a module: pytest backend/tests/unit/test_cli.py -v
"""

from pathlib import Path

import pytest

from timesheet_export import cli
from timesheet_export.pipeline import exporter as exporter_module

DATASET = """\
employees:
  - {id: "1", name: "Jane Doe", last_name: Doe, offices: [HR]}
  - {id: "2", name: "John Smith", last_name: Smith, offices: [ICT]}
timesheets:
  - employee_id: "1"
    month: 2024-01-01
    timetables:
      - {date: 2024-01-02, present: true, regular: true}
      - {date: 2024-01-06, present: true, regular: false}
time_logs:
  - {employee_id: "1", time: "2024-01-02T07:58:00", state: in, scanner: lobby}
  - {employee_id: "1", time: "2024-01-02T17:03:00", state: out, scanner: lobby}
  - {employee_id: "2", time: "2024-01-03T08:10:00", state: in}
signers:
  - {id: "7", name: "Ana Cruz", email: ana.cruz@example.gov.ph}
"""


@pytest.fixture
def dataset(temp_dir: Path) -> Path:
    path = temp_dir / "attendance.yaml"
    path.write_text(DATASET, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def fake_browser(monkeypatch, renderer_factory):
    monkeypatch.setattr(exporter_module, "BrowserRenderer", renderer_factory)


class TestCli:
    """timesheet-export command tests"""

    def test_export_collection(self, dataset, temp_dir):
        """Test exporting every employee in the dataset"""
        out = temp_dir / "out"
        code = cli.main([
            "--dataset", str(dataset),
            "--month", "2024-01",
            "--format", "default",
            "--output-dir", str(out),
        ])

        assert code == 0
        assert (out / "Timesheets 2024-01 (Doe,Smith).pdf").read_bytes().startswith(b"%PDF")

    def test_export_single_employee(self, dataset, temp_dir):
        """Test selecting one employee by id"""
        out = temp_dir / "out"
        code = cli.main([
            "--dataset", str(dataset),
            "--month", "2024-01",
            "--period", "1st",
            "--employee", "1",
            "--output-dir", str(out),
        ])

        assert code == 0
        assert (out / "Timesheets 2024-01 (First half) (Jane Doe).pdf").exists()

    def test_export_individual_archive(self, dataset, temp_dir):
        """Test one PDF per employee in a ZIP"""
        out = temp_dir / "out"
        code = cli.main([
            "--dataset", str(dataset),
            "--month", "2024-01",
            "--format", "preformatted",
            "--individual",
            "--output-dir", str(out),
        ])

        assert code == 0
        assert (out / "Timesheets 2024-01 (Doe,Smith).zip").exists()

    def test_config_file_reaches_renderer(self, dataset, temp_dir, monkeypatch, renderer_factory):
        """Test --config settings are what the renderer is built with"""
        settings = temp_dir / "timesheets.yaml"
        settings.write_text(
            "timeouts:\n"
            "  render_sec: 7\n"
            "storage:\n"
            "  scratch_dir: scratch\n",
            encoding="utf-8",
        )
        built = []

        def browser_renderer(**kwargs):
            renderer = renderer_factory(**kwargs)
            built.append(renderer)
            return renderer

        monkeypatch.setattr(exporter_module, "BrowserRenderer", browser_renderer)

        code = cli.main([
            "--dataset", str(dataset),
            "--config", str(settings),
            "--month", "2024-01",
            "--output-dir", str(temp_dir / "out"),
        ])

        assert code == 0
        assert built[0].config.timeouts.render_sec == 7
        assert built[0].config.storage.scratch_dir == (temp_dir / "scratch").resolve()

    def test_invalid_combination(self, dataset, temp_dir, capsys):
        """Test a rejected configuration exits with status 1"""
        code = cli.main([
            "--dataset", str(dataset),
            "--month", "2024-01",
            "--format", "default",
            "--period", "regular",
            "--output-dir", str(temp_dir / "out"),
        ])

        assert code == 1
        assert "not supported" in capsys.readouterr().err
        assert not (temp_dir / "out").exists()

    def test_digital_without_certificate(self, dataset, temp_dir, capsys, monkeypatch):
        """Test a signer without certificate files"""
        monkeypatch.setattr(cli.PdfSigner, "from_config", classmethod(lambda cls, config: cls(["pyhanko"])))
        code = cli.main([
            "--dataset", str(dataset),
            "--month", "2024-01",
            "--signature", "digital",
            "--signer", "7",
            "--output-dir", str(temp_dir / "out"),
        ])

        assert code == 1
        assert "not yet configured" in capsys.readouterr().err

    def test_load_signers(self, temp_dir):
        """Test certificate paths resolve against the dataset directory"""
        (temp_dir / "ana.pfx").write_bytes(b"PFX")
        (temp_dir / "ana.webp").write_bytes(b"WEBP")
        data = {
            "signers": [
                {"id": 7, "name": "Ana Cruz", "certificate": "ana.pfx", "specimen": "ana.webp", "password": "pw"}
            ]
        }

        signers, identities = cli.load_signers(data, temp_dir)

        identity = identities.identity(signers["7"])
        assert identity.certificate == b"PFX"
        assert identity.password == "pw"
        assert identity.owner_id == "7"
