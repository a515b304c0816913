"""Tests for recipe parsing."""

import pytest

from bibber.config import DEFAULT_RECIPE_FILENAME, Recipe, load_recipe, parse_recipe
from bibber.errors import ConfigurationError, RecipeParseError
from bibber.system.box import BoundaryShape

RECIPE = """\
# Argon-like particles
title       Argon in a box
start       0:ns
end         0.01:ns
timestep    10:fs
snapshot    1:ps
temperature 300:K
particles   100
boundary    cubic 100:nm 100:nm 100:nm
"""


def _replace(key, line):
    """Return RECIPE with the entry for ``key`` replaced by ``line``."""
    lines = [line if entry.startswith(key + " ") else entry for entry in RECIPE.splitlines()]
    return "\n".join(lines) + "\n"


def _without(key):
    lines = [entry for entry in RECIPE.splitlines() if not entry.startswith(key + " ")]
    return "\n".join(lines) + "\n"


class TestParseRecipe:
    """Test successful parsing."""

    def test_values(self):
        recipe = parse_recipe(RECIPE)
        assert isinstance(recipe, Recipe)
        assert recipe.title == "Argon in a box"
        assert recipe.start == 0.0
        assert recipe.end == pytest.approx(1e-11)
        assert recipe.timestep == pytest.approx(1e-14)
        assert recipe.snapshot == pytest.approx(1e-12)
        assert recipe.temperature == 300.0
        assert recipe.particles == 100
        assert recipe.boundary_shape is BoundaryShape.CUBIC
        assert recipe.boundary == pytest.approx((1e-7, 1e-7, 1e-7))
        assert recipe.duration == pytest.approx(1e-11)

    def test_order_irrelevant(self):
        reordered = "\n".join(reversed(RECIPE.splitlines()))
        assert parse_recipe(reordered).particles == 100

    def test_comments_and_blank_lines(self):
        text = RECIPE.replace("particles   100", "\n\nparticles   100   # count\n")
        assert parse_recipe(text).particles == 100

    def test_celsius_temperature(self):
        recipe = parse_recipe(_replace("temperature", "temperature 26.85:C"))
        assert recipe.temperature == pytest.approx(300.0)

    def test_to_parameters(self):
        params = parse_recipe(RECIPE).to_parameters()
        assert params.n_steps == 1000
        assert params.n_particles == 100
        assert params.title == "Argon in a box"

    def test_to_parameters_overrides(self):
        params = parse_recipe(RECIPE).to_parameters(thermostat_coupling=1e-12)
        assert params.thermostat_coupling == 1e-12


class TestRecipeErrors:
    """Test rejected recipes."""

    def test_unknown_key(self):
        with pytest.raises(RecipeParseError, match="unknown key 'pressure'") as info:
            parse_recipe(RECIPE + "pressure 1:bar\n")
        assert info.value.line == 10

    def test_duplicate_key(self):
        with pytest.raises(RecipeParseError, match="duplicate") as info:
            parse_recipe(RECIPE + "particles 5\n")
        assert info.value.line == 10

    @pytest.mark.parametrize("key", ["start", "end", "timestep", "boundary", "title"])
    def test_missing_key(self, key):
        with pytest.raises(RecipeParseError, match=f"missing required keys: {key}") as info:
            parse_recipe(_without(key))
        assert info.value.line is None

    def test_too_few_arguments(self):
        with pytest.raises(RecipeParseError, match="too few arguments") as info:
            parse_recipe(_replace("boundary", "boundary cubic 100:nm 100:nm"))
        assert info.value.line == 9

    def test_too_many_arguments(self):
        with pytest.raises(RecipeParseError, match="too many arguments"):
            parse_recipe(_replace("timestep", "timestep 10:fs 20:fs"))

    def test_wrong_unit_dimension(self):
        with pytest.raises(RecipeParseError, match="line 5: expected a time unit"):
            parse_recipe(_replace("timestep", "timestep 10:nm"))

    def test_missing_unit(self):
        with pytest.raises(RecipeParseError, match="no unit"):
            parse_recipe(_replace("end", "end 0.01"))

    def test_unsupported_boundary(self):
        with pytest.raises(RecipeParseError, match="unsupported boundary shape"):
            parse_recipe(_replace("boundary", "boundary sphere 1:nm 1:nm 1:nm"))

    def test_fractional_particle_count(self):
        with pytest.raises(RecipeParseError, match="integer"):
            parse_recipe(_replace("particles", "particles 2.5"))

    def test_parse_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            parse_recipe("")


class TestLoadRecipe:
    """Test reading recipe files."""

    def test_load(self, tmp_path):
        path = tmp_path / "run.bibber"
        path.write_text(RECIPE)
        assert load_recipe(path).title == "Argon in a box"

    def test_default_filename(self, tmp_path, monkeypatch):
        (tmp_path / DEFAULT_RECIPE_FILENAME).write_text(RECIPE)
        monkeypatch.chdir(tmp_path)
        assert load_recipe().particles == 100

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="cannot read recipe"):
            load_recipe(tmp_path / "nope.bibber")
