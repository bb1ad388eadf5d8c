"""Tests for the camp agenda CLI."""

import httpx
import pytest
from rich.console import Console
from typer.testing import CliRunner

import camp_agenda.cli as cli_module
from camp_agenda.agenda.gateway import AgendaGateway
from camp_agenda.cli import app
from camp_agenda.db.models import AgendaSession

runner = CliRunner()


@pytest.fixture
def cli_gateway(api, monkeypatch):
    """Point the CLI at the in-process service instead of a network URL."""

    def make_gateway(_base_url):
        client = httpx.AsyncClient(transport=httpx.ASGITransport(app=api), base_url="http://test")
        return AgendaGateway(client=client)

    monkeypatch.setattr(cli_module, "_make_gateway", make_gateway)
    # Wide console so table cells are not folded; keep loguru sinks owned by pytest
    monkeypatch.setattr(cli_module, "console", Console(width=200))
    monkeypatch.setattr(cli_module, "setup_logger", lambda *args, **kwargs: None)


@pytest.fixture
def camp_with_sessions(db_session, seeded_camp):
    camp_id = seeded_camp["camp_id"]
    db_session.add_all(
        [
            AgendaSession(camp_id=camp_id, day=1, title="Shooting", start_time="10:00", end_time="11:00", session_type="drill"),
            AgendaSession(camp_id=camp_id, day=1, title="Breakfast", start_time="07:30", end_time="08:15", session_type="meal"),
            AgendaSession(
                camp_id=camp_id,
                day=2,
                title="Scrimmage",
                start_time="15:00",
                end_time="16:30",
                session_type="scrimmage",
                status="scheduled",
                location_id=seeded_camp["location_id"],
            ),
        ]
    )
    db_session.commit()
    return seeded_camp


def test_show_prints_day_sorted(cli_gateway, camp_with_sessions):
    result = runner.invoke(app, ["show", str(camp_with_sessions["camp_id"]), "--day", "1"])

    assert result.exit_code == 0, result.output
    assert "Day 1" in result.output
    assert result.output.index("Breakfast") < result.output.index("Shooting")


def test_show_list_view_with_filter(cli_gateway, camp_with_sessions):
    result = runner.invoke(
        app,
        ["show", str(camp_with_sessions["camp_id"]), "--day", "2", "--view", "list", "--type", "scrimmage"],
    )

    assert result.exit_code == 0, result.output
    assert "Scrimmage" in result.output
    assert "Scheduled" in result.output
    assert "Court A" in result.output


def test_show_no_matches(cli_gateway, camp_with_sessions):
    result = runner.invoke(app, ["show", str(camp_with_sessions["camp_id"]), "--day", "3"])
    assert result.exit_code == 0
    assert "no sessions match" in result.output
    assert "Summer Skills Camp: Day 3" in result.output


def test_show_unknown_camp_fails(cli_gateway):
    result = runner.invoke(app, ["show", "999"])
    assert result.exit_code == 1
    assert "Camp not found" in result.output


def test_export_writes_csv(cli_gateway, camp_with_sessions, tmp_path):
    camp_id = camp_with_sessions["camp_id"]

    result = runner.invoke(app, ["export", str(camp_id), "--output-dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "Export successful" in result.output
    lines = (tmp_path / f"agenda_camp_{camp_id}.csv").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1 + 3


def test_export_nothing_to_export(cli_gateway, seeded_camp, tmp_path):
    result = runner.invoke(app, ["export", str(seeded_camp["camp_id"]), "--output-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "Nothing to export" in result.output
    assert list(tmp_path.iterdir()) == []
