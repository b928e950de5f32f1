"""Tests for the Brigandine rule formulas."""

from brigandine_sheet.sheet.rules import (
    BRIGANDINE_RULES,
    Rules,
    compute_initiative,
    compute_max_cold_blood,
    compute_max_vitality,
    compute_skill_level,
    extract_tens_digit,
)


class TestExtractTensDigit:
    """Tests for the tens bracket of a level."""

    def test_single_digits(self):
        """Test levels 0-9 are bracket 0."""
        for value in range(0, 10):
            assert extract_tens_digit(value) == 0

    def test_teens(self):
        """Test levels 10-19 are bracket 1."""
        for value in range(10, 20):
            assert extract_tens_digit(value) == 1

    def test_upper_values(self):
        """Test high levels keep every tens digit."""
        assert extract_tens_digit(99) == 9
        assert extract_tens_digit(100) == 10

    def test_negative_values_floor(self):
        """Test negative levels floor toward minus infinity."""
        assert extract_tens_digit(-1) == -1
        assert extract_tens_digit(-10) == -1


class TestSkillLevel:
    """Tests for the skill level formula."""

    def test_adds_base_and_progression(self):
        """Test the level is base plus progression."""
        assert compute_skill_level(0, 0) == 0
        assert compute_skill_level(5, 2) == 7
        assert compute_skill_level(30, 12) == 42

    def test_deterministic(self):
        """Test the same inputs always give the same level."""
        for base in range(0, 60, 7):
            for progression in range(0, 20, 3):
                first = compute_skill_level(base, progression)
                assert compute_skill_level(base, progression) == first


class TestDerivedFormulas:
    """Tests for pool maxima and initiative."""

    def test_max_vitality(self):
        """Test max vitality counts endurance twice."""
        # tens: strength 3, endurance 4 (counts double), willpower 2
        assert compute_max_vitality(35, 41, 29) == 3 + 8 + 2

    def test_max_vitality_low_levels(self):
        """Test single-digit levels give zero max vitality."""
        assert compute_max_vitality(9, 9, 9) == 0

    def test_max_cold_blood(self):
        """Test max cold blood counts willpower twice."""
        # tens: willpower 2 (counts double), knowledge 5, combat 1
        assert compute_max_cold_blood(25, 50, 19) == 4 + 5 + 1

    def test_initiative_sums_tens(self):
        """Test initiative is the sum of its inputs."""
        assert compute_initiative(3, 2, 4) == 9
        assert compute_initiative(0, 0, 0) == 0


class TestRulesTable:
    """Tests for the injectable rule table."""

    def test_default_table_uses_module_functions(self):
        """Test the default table uses the standard formulas."""
        assert BRIGANDINE_RULES.compute_skill_level(5, 2) == 7
        assert BRIGANDINE_RULES.extract_tens_digit(57) == 5

    def test_single_rule_can_be_overridden(self):
        """Test overriding one rule keeps the others."""
        house_rules = Rules(compute_skill_level=lambda base, progression: base * 2 + progression)
        assert house_rules.compute_skill_level(5, 2) == 12
        assert house_rules.compute_initiative(1, 1, 1) == 3
