import pytest

from shinyhunt import cli
from shinyhunt.backend import SqlHuntStore
from shinyhunt.models import Pokemon
from shinyhunt.sources import pokeapi

ROSTER = [
    Pokemon(id=1, name="Bulbasaur", sprite="b.png"),
    Pokemon(id=4, name="Charmander", sprite="c.png"),
    Pokemon(id=25, name="Pikachu", sprite="p.png"),
]


@pytest.fixture
def run(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(pokeapi, "fetch_roster", lambda gen=None, **kwargs: list(ROSTER))
    base = ["--config", str(tmp_path / "missing.json"), "--db", str(tmp_path / "hunts.db")]

    def _run(*argv):
        cli.main(base + list(argv))
        return capsys.readouterr().out

    return _run


def test_odds_command(run):
    out = run("odds", "--encounters", "8192")
    assert "Rate: 1 / 8192" in out
    assert "Chance so far: 63.21%" in out


def test_odds_with_masuda(run):
    out = run("odds", "--encounters", "0", "--method", "masuda-method")
    assert "Rate: 1 / 1638" in out
    assert "Chance so far: 0.00%" in out


def test_odds_ignores_unknown_methods(run):
    assert "Rate: 1 / 8192" in run("odds", "--method", "poke-radar")


def test_methods_command(run):
    assert "masuda-method\tMasuda Method\t+4 rolls" in run("methods")


def test_hunt_updates_are_saved(run, tmp_path):
    run("--user", "ash", "hunt", "encounter", "25", "100")
    run("--user", "ash", "hunt", "encounter", "25", "-150")
    run("--user", "ash", "hunt", "encounter", "25")
    run("--user", "ash", "hunt", "method", "25", "masuda-method")
    out = run("--user", "ash", "hunt", "notes", "25", "Viridian Forest at night")

    assert "encounters: 1" in out
    assert "Methods: Masuda Method" in out
    assert "Notes: Viridian Forest at night" in out
    assert "https://www.serebii.net/pokedex-dp/025.shtml" in out

    hunt = SqlHuntStore(tmp_path / "hunts.db").read_hunts("ash")[25]
    assert hunt.encounters == 1
    assert hunt.methods == ["masuda-method"]


def test_hunt_method_off_and_clear(run, tmp_path):
    run("--user", "ash", "hunt", "method", "25", "masuda-method")
    out = run("--user", "ash", "hunt", "method", "25", "masuda-method", "--off")
    assert "Methods: -" in out
    assert "Cleared hunt #0025" in run("--user", "ash", "hunt", "clear", "25")
    assert SqlHuntStore(tmp_path / "hunts.db").read_hunts("ash") == {}


def test_hunt_edit_requires_user(run):
    with pytest.raises(SystemExit):
        run("hunt", "encounter", "25")


def test_unknown_method_toggle_is_an_error(run):
    with pytest.raises(SystemExit):
        run("--user", "ash", "hunt", "method", "25", "poke-radar")


def test_roster_command(run):
    run("--user", "ash", "hunt", "encounter", "4", "42")
    out = run("--user", "ash", "roster", "--sort", "encounters-desc")
    assert "Box #1 (4-25)" in out
    assert out.index("Charmander") < out.index("Bulbasaur")
    assert "42" in out


def test_roster_search(run):
    out = run("roster", "--search", "chu")
    assert "Search Results" in out
    assert "Pikachu" in out
    assert "Bulbasaur" not in out
    assert "No Pokémon found." in run("roster", "--search", "zzz")


def test_search_command(run):
    assert "#0004 Charmander" in run("search", "char")
    assert "No Pokémon found." in run("search", "zzz")


def test_stats_command(run):
    run("--user", "ash", "hunt", "encounter", "1", "10")
    run("--user", "ash", "hunt", "encounter", "25", "1000")
    out = run("--user", "ash", "stats")
    assert "Total Encounters: 1,010" in out
    assert "Active Hunts: 2" in out
    assert "Avg. Encounters: 505" in out
    assert "Luckiest Hunt: Bulbasaur (10 encounters)" in out
    assert "#1 Pikachu 1,000" in out
    assert "Gen 1: 1,010 encounters, 2 hunts" in out
