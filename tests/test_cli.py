import json

import pytest

from quickcash.cli import main


@pytest.fixture
def catalog(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text(
        json.dumps(
            {
                "j1": {"name": "Cafe Barista", "category": "Retail", "latitude": 44.6489, "longitude": -63.5753},
                "j2": {"name": "Montreal Movers", "category": "Hard Labour", "location": 2},
                "j3": {
                    "name": "My Own Gig",
                    "category": "Retail",
                    "email": "me@example.com",
                    "latitude": 44.6500,
                    "longitude": -63.5760,
                },
            }
        ),
        encoding="utf-8",
    )
    return str(path)


def test_cli_distance(capsys):
    code = main(["distance", "--from-lat", "44.6356", "--from-lon", "-63.5957", "--to-lat", "44.6356", "--to-lon", "-63.5957"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "0.0 km"


def test_cli_nearby_text_output(capsys, catalog):
    code = main(["nearby", "--lat", "44.6488", "--lon", "-63.5752", "--catalog", catalog, "--email", "me@example.com"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Cafe Barista [Retail]" in out
    assert "My Own Gig" not in out
    assert "Montreal Movers" not in out


def test_cli_search_json(capsys, catalog):
    code = main(["search", "--lat", "44.6488", "--lon", "-63.5752", "--catalog", catalog, "--json"])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert [r["job"]["id"] for r in data["results"]] == ["j1", "j3", "j2"]


def test_cli_dashboard_employer(capsys, catalog):
    code = main(["dashboard", "--username", "Sam", "--role", "Employer", "--catalog", catalog])

    assert code == 0
    out = capsys.readouterr().out
    assert "Welcome, Sam" in out
    assert "Current Role: Employer" in out
    assert "jobs found nearby" not in out


def test_cli_rejects_half_an_origin(catalog):
    with pytest.raises(SystemExit) as exc:
        main(["search", "--lat", "44.6", "--catalog", catalog])
    assert exc.value.code == 2


def test_cli_rejects_unknown_category(catalog):
    with pytest.raises(SystemExit) as exc:
        main(["search", "--category", "Astronomy", "--catalog", catalog])
    assert exc.value.code == 2


def test_cli_missing_catalog_is_a_source_failure(capsys, tmp_path):
    code = main(["nearby", "--lat", "44.6488", "--lon", "-63.5752", "--catalog", str(tmp_path / "absent.json")])

    assert code == 1
    assert "job source unavailable" in capsys.readouterr().err


def test_cli_malformed_catalog_is_a_source_failure(capsys, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    code = main(["search", "--catalog", str(path)])

    assert code == 1
    assert "job source unavailable" in capsys.readouterr().err


def test_cli_rejects_malformed_email(catalog):
    with pytest.raises(SystemExit) as exc:
        main(["nearby", "--lat", "44.6", "--lon", "-63.5", "--catalog", catalog, "--email", "me@example"])
    assert exc.value.code == 2
