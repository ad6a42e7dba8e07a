from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from slopeone import DifferenceModel, SlopeOnePredictor
from slopeone.cli import main, parse_rating


RATINGS_CSV = """userId,movieId,rating
1,2005,2.4
1,5513,1.3
1,13035,2.0
2,5513,4.0
2,359602,5.0
2,13035,1.5
2,29074,4.0
3,29074,4.3
3,359602,2.5
3,2005,5.0
"""


def test_parse_rating() -> None:
    assert parse_rating("2005=2.0") == (2005, 2.0)
    with pytest.raises(argparse.ArgumentTypeError):
        parse_rating("2005:2.0")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_rating("abc=1")


def test_cli_prints_predictions(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "ratings.csv").write_text(RATINGS_CSV)
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("dataset:\n  ratings_path: ratings.csv\n")

    main(["--config", str(cfg_path), "--rate", "2005=2.0", "--rate", "29074=3.2", "--k", "2"])

    out = capsys.readouterr().out
    assert "Predicted Ratings" in out
    assert "5513" in out
    assert "359602" in out
    assert "13035" not in out


def test_cli_without_overlap(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ratings = tmp_path / "ratings.csv"
    ratings.write_text(RATINGS_CSV)

    main(["--config", str(tmp_path / "absent.yaml"), "--ratings-csv", str(ratings), "--rate", "1=3.0"])

    assert "No predictions" in capsys.readouterr().out


@pytest.fixture()
def client():
    pytest.importorskip("fastapi")
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    from slopeone.service import app as app_mod

    model = DifferenceModel()
    model.train(
        [
            {2005: 2.4, 5513: 1.3, 13035: 2.0},
            {5513: 4, 359602: 5, 13035: 1.5, 29074: 4},
            {29074: 4.3, 359602: 2.5, 2005: 5},
        ]
    )
    # Skip the lifespan (no `with`): inject a trained predictor directly.
    app_mod.app.state.predictor = SlopeOnePredictor(model)
    yield TestClient(app_mod.app)
    app_mod.app.state.predictor = None


def test_service_predict(client) -> None:
    resp = client.post("/predict", json={"ratings": {"2005": 2.0, "29074": 3.2}})
    assert resp.status_code == 200

    body = resp.json()
    assert body["n_known"] == 2
    got = {r["itemId"]: r["rating"] for r in body["results"]}
    assert got == {5513: pytest.approx(2.05), 359602: pytest.approx(1.7), 13035: pytest.approx(1.15)}


def test_service_recommend_and_health(client) -> None:
    resp = client.post("/recommend", json={"ratings": {"2005": 2.0, "29074": 3.2}, "k": 1})
    assert resp.status_code == 200
    assert [r["itemId"] for r in resp.json()["results"]] == [5513]

    empty = client.post("/recommend", json={"ratings": {}, "k": 1})
    assert empty.status_code == 200
    assert empty.json()["results"] == []
    assert client.post("/predict", json={"ratings": {}}).json()["results"] == []

    health = client.get("/health").json()
    assert health["status"] == "ok"
    assert health["items"] == 5
    assert health["rating_sets"] == 3


def test_service_not_initialized(client) -> None:
    from slopeone.service import app as app_mod

    app_mod.app.state.predictor = None
    assert client.post("/predict", json={"ratings": {"1": 1.0}}).status_code == 503


def test_cli_min_support_override(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "ratings.csv").write_text(RATINGS_CSV)
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("dataset:\n  ratings_path: ratings.csv\n")

    main(["--config", str(cfg_path), "--rate", "2005=2.0", "--rate", "29074=3.2", "--min-support", "2"])

    out = capsys.readouterr().out
    # (359602, 29074) is the only pair rated together twice
    assert "359602" in out
    assert "5513" not in out
    assert "13035" not in out


def test_cli_default_ratings_path_resolves_from_repo_root(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    (tmp_path / ".git").mkdir()
    raw_dir = tmp_path / "data" / "raw"
    raw_dir.mkdir(parents=True)
    (raw_dir / "ratings.csv").write_text(RATINGS_CSV)
    workdir = tmp_path / "src"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    main(["--config", str(tmp_path / "absent.yaml"), "--rate", "2005=2.0", "--rate", "29074=3.2"])

    assert "5513" in capsys.readouterr().out


def test_service_lifespan_trains_from_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pytest.importorskip("fastapi")
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    from slopeone.service import app as app_mod

    (tmp_path / "config.yaml").write_text("")
    (tmp_path / "ratings.csv").write_text(RATINGS_CSV)
    cfg_path = tmp_path / "service.yaml"
    cfg_path.write_text("dataset:\n  ratings_path: ratings.csv\nslope_one:\n  min_support: 1\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CONFIG_PATH", "service.yaml")

    try:
        with TestClient(app_mod.app) as client:
            health = client.get("/health").json()
            assert health == {"status": "ok", "items": 5, "pairs": 25, "rating_sets": 3}

            resp = client.post("/predict", json={"ratings": {"2005": 2.0, "29074": 3.2}})
            assert resp.status_code == 200
            got = {r["itemId"]: r["rating"] for r in resp.json()["results"]}
            assert got == {5513: pytest.approx(2.05), 359602: pytest.approx(1.7), 13035: pytest.approx(1.15)}
    finally:
        app_mod.app.state.predictor = None
