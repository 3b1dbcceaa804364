"""
Tests for the Reporter modules.
"""

import io
import json
import os

import pytest
from rich.console import Console

from glacier_sweeper.cleaners.vault_purger import DeleteStatus, DeletionOutcome, PurgeSummary
from glacier_sweeper.core.fleet_sweeper import SweepReport, VaultReport, VaultStatus
from glacier_sweeper.core.models import Vault
from glacier_sweeper.reporters.cli_reporter import CLIReporter
from glacier_sweeper.reporters.json_reporter import JSONReporter


@pytest.fixture
def sample_vault():
    return Vault(region="eu-west-1", name="old-backups")


@pytest.fixture
def sample_sweep_report(sample_vault):
    """Create a SweepReport with one purged, one declined and one failed vault."""
    summary = PurgeSummary(vault=sample_vault, job_id="job-1")
    summary.add_outcome(
        DeletionOutcome("a1", "old-backups", "eu-west-1", DeleteStatus.SUCCESS)
    )
    summary.add_outcome(
        DeletionOutcome(
            "a2",
            "old-backups",
            "eu-west-1",
            DeleteStatus.FAILED,
            error_message="Archive no longer exists (already deleted)",
            error_code="ResourceNotFoundException",
        )
    )
    summary.complete()

    report = SweepReport(
        regions_requested=["eu-west-1", "me-south-1"],
        regions_visited=["eu-west-1", "me-south-1"],
        vault_reports=[
            VaultReport(vault=sample_vault, status=VaultStatus.PURGED, summary=summary),
            VaultReport(vault=Vault("eu-west-1", "keep-me"), status=VaultStatus.DECLINED),
            VaultReport(
                vault=Vault("eu-west-1", "broken"),
                status=VaultStatus.FAILED,
                error="Job output is not a JSON object",
                error_type="MalformedOutputError",
            ),
        ],
        region_errors={"me-south-1": "Error listing Glacier vaults in region me-south-1"},
    )
    report.complete()
    return report


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def reporter(output):
    return CLIReporter(console=Console(file=output, width=120))


class TestConfirmVault:
    """Tests for the per-vault prompt."""

    @pytest.mark.parametrize("answer", ["y", "Y", " y "])
    def test_yes_confirms(self, reporter, output, sample_vault, monkeypatch, answer):
        prompts = []

        def fake_input(prompt):
            prompts.append(prompt)
            return answer

        monkeypatch.setattr(reporter.console, "input", fake_input)

        assert reporter.confirm_vault(sample_vault) is True
        assert "Would you like to destroy this vault? (y/N)" in prompts[0]
        assert "Vault old-backups in region eu-west-1 marked for deletion." in output.getvalue()

    @pytest.mark.parametrize("answer", ["", "n", "N", "yes", "no", "q"])
    def test_anything_else_declines(self, reporter, output, sample_vault, monkeypatch, answer):
        monkeypatch.setattr(reporter.console, "input", lambda prompt: answer)

        assert reporter.confirm_vault(sample_vault) is False
        assert "marked for deletion" not in output.getvalue()

    def test_closed_stdin_declines(self, reporter, sample_vault, monkeypatch):
        def closed(prompt):
            raise EOFError

        monkeypatch.setattr(reporter.console, "input", closed)

        assert reporter.confirm_vault(sample_vault) is False


class TestCLIReporter:
    """Tests for CLIReporter class."""

    def test_reporter_initialization(self):
        """Test CLI reporter initialization."""
        reporter = CLIReporter()
        assert reporter.console is not None

    def test_truncate_function(self):
        """Test text truncation."""
        # Short text should not be truncated
        assert CLIReporter._truncate("short", 10) == "short"

        # Long text should be truncated with ellipsis
        long_text = "This is a very long description that should be truncated"
        truncated = CLIReporter._truncate(long_text, 20)
        assert len(truncated) == 20
        assert truncated.endswith("...")

    def test_report_sweep(self, reporter, output, sample_sweep_report):
        reporter.report_sweep(sample_sweep_report)
        text = output.getvalue()

        assert "Summary" in text
        assert "old-backups" in text
        assert "keep-me" in text
        assert "Skipped regions:" in text
        assert "me-south-1" in text
        assert "[eu-west-1] old-backups a2" in text
        assert "cancelled" not in text

    def test_empty_results(self, reporter, output):
        """Test reporting when no vault was found."""
        report = SweepReport(regions_requested=["us-east-1"], regions_visited=["us-east-1"])
        report.complete()

        reporter.report_sweep(report)

        assert "No Glacier vaults found." in output.getvalue()

    def test_cancelled_note(self, reporter, output):
        report = SweepReport(cancelled=True)

        reporter.report_sweep(report)

        assert "Sweep was cancelled" in output.getvalue()

    def test_progress_lines(self, reporter, output):
        reporter.print_region_progress("us-west-2", "scanning")
        reporter.print_region_progress("me-south-1", "skipped")
        reporter.print_outcome(
            DeletionOutcome("a9", "v", "us-west-2", DeleteStatus.DRY_RUN)
        )
        text = output.getvalue()

        assert "Scanning for Glacier Vaults in region us-west-2" in text
        assert "Skipping region me-south-1" in text
        assert "a9 - Would delete" in text

    def test_dry_run_header(self, reporter, output):
        reporter.print_sweep_header(["us-east-1"], dry_run=True)

        assert "DRY-RUN MODE" in output.getvalue()

    def test_print_error_escapes_markup(self, reporter, output):
        reporter.print_error("Vault [logs] could not be listed")

        assert "Error: Vault [logs] could not be listed" in output.getvalue()


class TestJSONReporter:
    """Tests for JSONReporter class."""

    def test_export(self, sample_sweep_report, tmp_path):
        """Test exporting sweep results to JSON."""
        output_path = tmp_path / "sweep.json"
        reporter = JSONReporter(output_path=str(output_path))

        result_path = reporter.report(sample_sweep_report)

        assert result_path == str(output_path)
        with open(output_path, "r") as f:
            data = json.load(f)

        assert data["metadata"]["regions_requested"] == ["eu-west-1", "me-south-1"]
        assert data["metadata"]["totals"]["deleted_archives"] == 1
        assert data["metadata"]["totals"]["failed_vaults"] == 1
        assert data["region_errors"] == {
            "me-south-1": "Error listing Glacier vaults in region me-south-1"
        }
        assert [v["status"] for v in data["vaults"]] == ["purged", "declined", "failed"]
        outcomes = data["vaults"][0]["summary"]["outcomes"]
        assert [o["archive_id"] for o in outcomes] == ["a1", "a2"]
        assert outcomes[1]["error_code"] == "ResourceNotFoundException"

    def test_auto_generated_filename(self, sample_sweep_report, tmp_path, monkeypatch):
        """Test that filename is auto-generated when not specified."""
        monkeypatch.chdir(tmp_path)

        result_path = JSONReporter().report(sample_sweep_report)

        assert result_path.startswith("glacier_sweep_")
        assert result_path.endswith(".json")
        assert os.path.exists(tmp_path / result_path)

    def test_to_string(self, sample_sweep_report):
        """Test converting result to JSON string."""
        data = json.loads(JSONReporter().to_string(sample_sweep_report))

        assert "metadata" in data
        assert len(data["vaults"]) == 3
