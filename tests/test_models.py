import pytest
from pydantic import ValidationError

from shinyhunt.models import Hunt, ShinyMethod


def test_hunt_defaults():
    hunt = Hunt(pokemon_id=25)
    assert hunt.encounters == 0
    assert hunt.methods == []
    assert hunt.notes is None
    assert hunt.location is None


def test_hunt_rejects_negative_encounters():
    with pytest.raises(ValidationError):
        Hunt(pokemon_id=25, encounters=-1)


def test_hunt_methods_collapse_duplicates():
    hunt = Hunt(pokemon_id=25, methods=["masuda-method", "charm", "masuda-method"])
    assert hunt.methods == ["masuda-method", "charm"]


def test_shiny_method_validation():
    with pytest.raises(ValidationError):
        ShinyMethod(id="bad", name="Bad", rolls=-1)
    with pytest.raises(ValidationError):
        ShinyMethod(id="bad", name="Bad", rolls="lots")


def test_shiny_method_is_immutable():
    method = ShinyMethod(id="masuda-method", name="Masuda Method", rolls=4)
    with pytest.raises(ValidationError):
        method.rolls = 10
