"""
Unit tests for prize rule set validation
"""

import pytest
from decimal import Decimal

from app.core.exceptions import ValidationError
from app.services.prize_rules import PrizeRuleSpec, validate_rule_set


class TestRuleSetValidation:
    """A rule set is accepted only as a whole"""

    def test_valid_set_is_normalised_and_sorted(self):
        specs = validate_rule_set([
            {"rank": 2, "percentage": "30", "min_players": 3},
            {"rank": 1, "percentage": 70},
        ])

        assert specs == [
            PrizeRuleSpec(rank=1, percentage=Decimal("70.00"), min_players=0),
            PrizeRuleSpec(rank=2, percentage=Decimal("30.00"), min_players=3),
        ]

    def test_accepts_objects_with_attributes(self):
        specs = validate_rule_set([PrizeRuleSpec(rank=1, percentage=Decimal("100"), min_players=1)])
        assert specs[0].percentage == Decimal("100.00")

    def test_sum_of_99_rejected(self):
        with pytest.raises(ValidationError):
            validate_rule_set([
                {"rank": 1, "percentage": 69},
                {"rank": 2, "percentage": 30},
            ])

    def test_sum_of_101_rejected(self):
        with pytest.raises(ValidationError):
            validate_rule_set([
                {"rank": 1, "percentage": 71},
                {"rank": 2, "percentage": 30},
            ])

    def test_fractional_percentages_summing_to_100_accepted(self):
        specs = validate_rule_set([
            {"rank": 1, "percentage": "33.34"},
            {"rank": 2, "percentage": "33.33"},
            {"rank": 3, "percentage": "33.33"},
        ])
        assert len(specs) == 3

    def test_empty_set_rejected(self):
        with pytest.raises(ValidationError):
            validate_rule_set([])

    def test_duplicate_rank_rejected(self):
        with pytest.raises(ValidationError):
            validate_rule_set([
                {"rank": 1, "percentage": 50},
                {"rank": 1, "percentage": 50},
            ])

    @pytest.mark.parametrize("rank", [0, -1, "1", 1.0, True])
    def test_bad_rank_rejected(self, rank):
        with pytest.raises(ValidationError):
            validate_rule_set([{"rank": rank, "percentage": 100}])

    @pytest.mark.parametrize("percentage", [0, -10, "100.01", "abc", None])
    def test_bad_percentage_rejected(self, percentage):
        with pytest.raises(ValidationError):
            validate_rule_set([{"rank": 1, "percentage": percentage}])

    @pytest.mark.parametrize("first, second", [("50.005", "49.995"), ("50.004", "49.996")])
    def test_sub_cent_percentages_rejected_not_rounded(self, first, second):
        with pytest.raises(ValidationError) as exc_info:
            validate_rule_set([
                {"rank": 1, "percentage": first},
                {"rank": 2, "percentage": second},
            ])
        assert "two decimal places" in exc_info.value.user_message

    def test_trailing_zeros_beyond_cents_accepted(self):
        specs = validate_rule_set([{"rank": 1, "percentage": "100.000"}])
        assert specs[0].percentage == Decimal("100.00")

    @pytest.mark.parametrize("percentage", ["NaN", "Infinity"])
    def test_non_finite_percentage_rejected(self, percentage):
        with pytest.raises(ValidationError):
            validate_rule_set([{"rank": 1, "percentage": percentage}])

    def test_negative_min_players_rejected(self):
        with pytest.raises(ValidationError):
            validate_rule_set([{"rank": 1, "percentage": 100, "min_players": -1}])

    def test_validation_error_carries_code(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_rule_set([{"rank": 1, "percentage": 99}])
        assert exc_info.value.to_dict()["error"] == "validation_error"
        assert exc_info.value.status_code == 400
