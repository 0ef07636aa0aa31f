import json
from argparse import Namespace
from pathlib import Path

from postsync import cli
from postsync.gateway.ncb import NCBGateway
from postsync.models.migration import MigrationConfig

from conftest import SOURCE, TARGET, FakeResponse, FakeSession, InMemoryGateway


def test_run_migration_dry_run_prints_summary(config, capsys, tmp_path: Path):
    gateway = InMemoryGateway({SOURCE: [{"title": "One"}, {"title": "Two"}], TARGET: []})
    output = tmp_path / "result.json"
    args = Namespace(live=False, source_instance=None, output=str(output))

    exit_code = cli.run_migration(args, config=config, gateway=gateway)

    assert exit_code == 0
    assert gateway.creates == []
    assert "Would Create: 2" in capsys.readouterr().out
    assert json.loads(output.read_text(encoding="utf-8"))["created"] == 2


def test_run_migration_live_creates(config):
    gateway = InMemoryGateway({SOURCE: [{"title": "One"}], TARGET: []})
    args = Namespace(live=True, source_instance=None, output=None)

    assert cli.run_migration(args, config=config, gateway=gateway) == 0
    assert len(gateway.creates) == 1


def test_run_migration_missing_config_exits_nonzero(capsys):
    args = Namespace(live=False, source_instance=None, output=None)

    exit_code = cli.run_migration(args, config=MigrationConfig(), gateway=InMemoryGateway())

    assert exit_code == 1
    assert "Missing NCB_API_KEY" in capsys.readouterr().out


def test_preview_prints_payloads_and_errors(tmp_path: Path, capsys):
    rows = tmp_path / "rows.json"
    rows.write_text(json.dumps({"data": [{"id": 5, "post_title": "My Trip"}, {"title": ""}]}), encoding="utf-8")

    exit_code = cli.main(["preview", "--input", str(rows)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert '"slug": "my-trip"' in out
    assert "Missing title/slug" in out
    assert '"id"' not in out


def test_slug_command(capsys):
    exit_code = cli.main(["slug", "Post", "--existing", "post,post-2"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "post-3"


def test_no_command_prints_help():
    assert cli.main([]) == 1


def test_preview_details_show_display_fields(tmp_path: Path, capsys):
    rows = tmp_path / "rows.json"
    rows.write_text(json.dumps([{
        "title": "My Trip",
        "content": "<p>Seoul &amp; <b>Busan</b></p>",
        "date": "2025-12-02",
        "image_url": "https://www.dropbox.com/s/abc/pic.jpg?dl=0",
    }]), encoding="utf-8")

    exit_code = cli.main(["preview", "--input", str(rows), "--details"])

    out = capsys.readouterr().out
    details = json.loads(out.split("-" * 40)[0])["details"]
    assert exit_code == 0
    assert details["readTime"] == "1 min read"
    assert details["excerpt"] == "Seoul & Busan"
    assert details["displayDate"] == "Dec 2, 2025"
    assert details["imageUrl"] == "https://www.dropbox.com/s/abc/pic.jpg?raw=1"
    assert details["imageInlineUrl"] == details["imageUrl"]
    assert details["imageSrc"].startswith("/api/media/dropbox?url=https%3A%2F%2Fwww.dropbox.com")


def test_describe_post_truncates_long_excerpts():
    details = cli.describe_post({"content": "word " * 100}, excerpt_length=20)

    assert details["excerpt"] == "word word word word..."
    assert details["displayDate"] == "—"
    assert details["imageSrc"] == ""


def test_slug_command_editor_rules(capsys):
    exit_code = cli.main(["slug", "Hello, World_again", "--editor", "--existing", "hello-world-again"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "hello-world-again-2"


def test_run_migration_closes_gateway_it_creates(config, monkeypatch):
    session = FakeSession(FakeResponse(body={"data": []}), FakeResponse(body={"data": []}))
    monkeypatch.setattr(NCBGateway, "_create_session", lambda self: session)
    args = Namespace(live=False, source_instance=None, output=None)

    assert cli.run_migration(args, config=config) == 0
    assert session.closed is True
