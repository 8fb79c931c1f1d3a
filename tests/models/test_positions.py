"""
Tests for position models

Validation rules for OptionPosition (field constraints and roll-field
consistency), plus the derived helpers.
"""

import pytest
from pydantic import ValidationError

from icc.models import OptionPosition, PriorityOption, PriorityReason, PutCall


class TestOptionPosition:
    def test_defaults(self, make_option):
        position = make_option()

        assert position.multiplier == 100
        assert position.roll_count == 0
        assert position.is_rolled is False
        assert position.roll_history == ()
        assert position.break_even_price is None

    def test_strike_must_be_positive(self, make_option):
        with pytest.raises(ValidationError):
            make_option(strike=0.0)

    def test_put_call_from_string(self, make_option):
        row = make_option().model_dump()
        row["put_call"] = "CALL"

        assert OptionPosition.model_validate(row).put_call == PutCall.CALL

    def test_days_to_expiry(self, make_option, as_of):
        position = make_option(dte=12)

        assert position.days_to_expiry(as_of) == 12

    def test_expired_position_has_negative_dte(self, make_option, as_of):
        assert make_option(dte=-3).days_to_expiry(as_of) == -3

    def test_contract_size(self, make_option):
        assert make_option(quantity=-7).contract_size == 700

    def test_is_itm(self, make_option):
        put = make_option(strike=100.0)
        call = make_option(strike=100.0, put_call=PutCall.CALL)

        assert put.is_itm(99.0) and not put.is_itm(100.0)
        assert call.is_itm(101.0) and not call.is_itm(100.0)

    def test_consistent_roll_fields_accepted(self, make_option, sample_rolls):
        position = make_option(
            roll_history=sample_rolls,
            roll_count=2,
            is_rolled=True,
            total_roll_credits=3500.0,
            total_realized_pl=-200.0,
        )

        assert position.is_rolled

    def test_roll_count_mismatch_rejected(self, make_option, sample_rolls):
        with pytest.raises(ValidationError, match="roll_count"):
            make_option(roll_history=sample_rolls, roll_count=1, is_rolled=True,
                        total_roll_credits=3500.0, total_realized_pl=-200.0)

    def test_is_rolled_mismatch_rejected(self, make_option):
        with pytest.raises(ValidationError, match="is_rolled"):
            make_option(is_rolled=True)

    def test_credit_total_mismatch_rejected(self, make_option, sample_rolls):
        with pytest.raises(ValidationError, match="total_roll_credits"):
            make_option(roll_history=sample_rolls, roll_count=2, is_rolled=True,
                        total_roll_credits=3000.0, total_realized_pl=-200.0)

    def test_roll_entry_is_frozen(self, sample_rolls):
        with pytest.raises(ValidationError):
            sample_rolls[0].credit = 0.0

    def test_round_trip_from_row(self, make_option):
        position = make_option(delta=-0.3)

        assert OptionPosition.model_validate(position.model_dump()) == position


class TestPriorityOption:
    @pytest.mark.parametrize(
        "reason,expected",
        [
            (PriorityReason.ITM, "ITM by 2.5%"),
            (PriorityReason.HIGH_DELTA, "Delta -0.42"),
            (PriorityReason.NEAR_STRIKE, "2.5% from strike"),
            (PriorityReason.EXPIRING_SOON, "3d to expiry"),
        ],
    )
    def test_reason_label(self, make_option, reason, expected):
        item = PriorityOption(
            position=make_option(delta=-0.42),
            current_price=146.25,
            distance_to_strike=-2.5,
            distance_to_strike_abs=3.75,
            priority_score=100.0,
            reason=reason,
            dte=3,
        )

        assert item.reason_label == expected
