"""Tests for the forward gross-to-net calculator.

Expected values are hand-computed against the four-bracket fixture:
[0, 200) 0%, [200, 500) 15%, [500, 1000) 25%, [1000, inf) 30%, contribution 9.68%.
"""

from decimal import Decimal

import pytest

from paycore.engines.forward import apply_brackets, compute_net
from paycore.exceptions import ConfigError, ValidationError


class TestApplyBrackets:
    def test_zero_income(self, sample_config):
        assert apply_brackets(Decimal("0"), sample_config.brackets) == Decimal("0")

    def test_inside_zero_rate_bracket(self, sample_config):
        assert apply_brackets(Decimal("150"), sample_config.brackets) == Decimal("0")

    def test_spans_three_brackets(self, sample_config):
        assert apply_brackets(Decimal("903.2"), sample_config.brackets) == Decimal("145.8")

    def test_exactly_on_bound(self, sample_config):
        assert apply_brackets(Decimal("1000"), sample_config.brackets) == Decimal("170")

    def test_top_bracket(self, sample_config):
        assert apply_brackets(Decimal("1806.4"), sample_config.brackets) == Decimal("411.92")

    def test_no_rounding_inside_accumulation(self, sample_config):
        tax = apply_brackets(Decimal("301.0663656"), sample_config.brackets)
        assert tax == Decimal("15.15995484")


class TestScenarioA:
    """Gross 1000, no dependents, not head of household."""

    def test_breakdown(self, sample_config):
        result = compute_net(Decimal("1000"), False, 0, sample_config)
        assert result.gross == Decimal("1000.000")
        assert result.contribution == Decimal("96.800")
        assert result.deduction == Decimal("0.000")
        assert result.taxable_base == Decimal("903.200")
        assert result.tax == Decimal("145.800")
        assert result.solidarity == Decimal("0.000")
        assert result.net == Decimal("757.400")

    def test_outputs_have_three_decimals(self, sample_config):
        result = compute_net(Decimal("1000"), False, 0, sample_config)
        assert str(result.net) == "757.400"
        assert str(result.contribution) == "96.800"

    def test_total_withheld(self, sample_config):
        result = compute_net(Decimal("1000"), False, 0, sample_config)
        assert result.total_withheld == Decimal("242.600")

    def test_accepts_int_str_and_float(self, sample_config):
        for gross in (1000, "1000", 1000.0):
            assert compute_net(gross, False, 0, sample_config).net == Decimal("757.400")

    def test_accepts_raw_mapping_config(self, raw_config):
        assert compute_net(Decimal("1000"), False, 0, raw_config).net == Decimal("757.400")


class TestKnownValues:
    @pytest.mark.parametrize(
        "gross, contribution, taxable_base, tax, net",
        [
            ("200", "19.360", "180.640", "0.000", "180.640"),
            ("500", "48.400", "451.600", "37.740", "413.860"),
            ("2000", "193.600", "1806.400", "411.920", "1394.480"),
        ],
    )
    def test_fixture_values(self, sample_config, gross, contribution, taxable_base, tax, net):
        result = compute_net(Decimal(gross), False, 0, sample_config)
        assert result.contribution == Decimal(contribution)
        assert result.taxable_base == Decimal(taxable_base)
        assert result.tax == Decimal(tax)
        assert result.net == Decimal(net)

    def test_contribution_rounded_before_tax(self, sample_config):
        # contribution 32.2666344 -> 32.267, base 301.066, tax 15.1599 -> 15.160
        result = compute_net(Decimal("333.333"), False, 0, sample_config)
        assert result.contribution == Decimal("32.267")
        assert result.taxable_base == Decimal("301.066")
        assert result.tax == Decimal("15.160")
        assert result.net == Decimal("285.906")

    def test_tax_rounded_after_accumulation(self, sample_config):
        # base 541.922: tax 45 + 41.922 * 0.25 = 55.4805, rounded half up once summed
        result = compute_net(Decimal("600.002"), False, 0, sample_config)
        assert result.contribution == Decimal("58.080")
        assert result.taxable_base == Decimal("541.922")
        assert result.tax == Decimal("55.481")
        assert result.net == Decimal("486.441")

    def test_family_deduction_lowers_tax(self, family_config):
        # deduction 150 + 2 * 100 = 350, base 553.2, tax 45 + 53.2 * 0.25
        result = compute_net(Decimal("1000"), True, 2, family_config)
        assert result.deduction == Decimal("350.000")
        assert result.taxable_base == Decimal("553.200")
        assert result.tax == Decimal("58.300")
        assert result.net == Decimal("844.900")

    def test_deduction_larger_than_income(self, family_config):
        result = compute_net(Decimal("300"), True, 4, family_config)
        assert result.taxable_base == Decimal("0.000")
        assert result.tax == Decimal("0.000")
        assert result.net == Decimal("270.960")

    def test_contribution_ceiling(self, sample_config):
        config = sample_config.model_copy(update={"contribution_ceiling": Decimal("500")})
        result = compute_net(Decimal("1000"), False, 0, config)
        assert result.contribution == Decimal("48.400")
        assert result.taxable_base == Decimal("951.600")
        assert result.tax == Decimal("157.900")
        assert result.net == Decimal("793.700")

    def test_ceiling_above_gross_has_no_effect(self, sample_config):
        config = sample_config.model_copy(update={"contribution_ceiling": Decimal("5000")})
        assert compute_net(Decimal("1000"), False, 0, config).net == Decimal("757.400")

    def test_solidarity_contribution(self, sample_config):
        config = sample_config.model_copy(update={"solidarity_rate": Decimal("0.01")})
        result = compute_net(Decimal("1000"), False, 0, config)
        assert result.solidarity == Decimal("9.032")
        assert result.tax == Decimal("145.800")
        assert result.net == Decimal("748.368")


class TestBreakdownAddsUp:
    @pytest.mark.parametrize("solidarity_rate", ["0", "0.005"])
    def test_net_is_gross_less_reported_parts(self, sample_config, solidarity_rate):
        config = sample_config.model_copy(update={"solidarity_rate": Decimal(solidarity_rate)})
        gross = Decimal("600.000")
        while gross <= Decimal("601.000"):
            result = compute_net(gross, False, 0, config)
            withheld = result.contribution + result.tax + result.solidarity
            assert result.net == result.gross - withheld, f"breakdown does not add up at gross {gross}"
            assert result.total_withheld == withheld
            gross += Decimal("0.001")

    def test_taxable_base_follows_reported_contribution(self, family_config):
        gross = Decimal("1500.000")
        while gross <= Decimal("1500.100"):
            result = compute_net(gross, True, 1, family_config)
            assert result.taxable_base == result.gross - result.contribution - result.deduction
            gross += Decimal("0.001")


class TestZeroBoundary:
    def test_zero_gross(self, sample_config):
        result = compute_net(Decimal("0"), False, 0, sample_config)
        assert result.net == Decimal("0")
        assert result.contribution == Decimal("0")
        assert result.tax == Decimal("0")
        assert result.taxable_base == Decimal("0")

    def test_negative_gross_is_all_zero(self, family_config):
        result = compute_net(Decimal("-50"), True, 2, family_config)
        assert result.gross == Decimal("0")
        assert result.net == Decimal("0")
        assert result.deduction == Decimal("0")


class TestMonotonicity:
    def test_net_strictly_increases(self, sample_config):
        prev = None
        gross = Decimal("0")
        while gross <= Decimal("2500"):
            net = compute_net(gross, False, 0, sample_config).net
            if prev is not None:
                assert net > prev, f"net not increasing at gross {gross}"
            prev = net
            gross += Decimal("2.5")

    @pytest.mark.parametrize("bound", ["200", "500", "1000"])
    def test_continuous_across_bracket_bounds(self, sample_config, bound):
        gross = Decimal(bound) / (Decimal("1") - sample_config.contribution_rate)
        below = compute_net(gross - Decimal("0.01"), False, 0, sample_config).net
        above = compute_net(gross + Decimal("0.01"), False, 0, sample_config).net
        assert Decimal("0") < above - below < Decimal("0.02")

    def test_dependents_never_decrease_net(self, family_config):
        for gross in (Decimal("250"), Decimal("800"), Decimal("1500"), Decimal("6000")):
            for head in (False, True):
                nets = [compute_net(gross, head, n, family_config).net for n in range(7)]
                assert nets == sorted(nets)

    def test_head_of_household_never_decreases_net(self, family_config):
        for gross in (Decimal("250"), Decimal("800"), Decimal("1500")):
            single = compute_net(gross, False, 1, family_config).net
            head = compute_net(gross, True, 1, family_config).net
            assert head >= single


class TestInputValidation:
    def test_negative_dependents(self, sample_config):
        with pytest.raises(ValidationError) as exc_info:
            compute_net(Decimal("1000"), False, -1, sample_config)
        assert exc_info.value.field == "dependents"

    def test_negative_dependents_with_zero_gross(self, sample_config):
        with pytest.raises(ValidationError):
            compute_net(Decimal("0"), False, -1, sample_config)

    def test_non_integer_dependents(self, sample_config):
        with pytest.raises(ValidationError):
            compute_net(Decimal("1000"), False, 1.5, sample_config)

    def test_non_numeric_gross(self, sample_config):
        with pytest.raises(ValidationError) as exc_info:
            compute_net("a lot", False, 0, sample_config)
        assert exc_info.value.field == "gross"

    def test_infinite_gross(self, sample_config):
        with pytest.raises(ValidationError):
            compute_net(Decimal("Infinity"), False, 0, sample_config)

    def test_malformed_config(self, sample_config):
        brackets = sample_config.brackets
        bad = sample_config.model_copy(update={"brackets": (brackets[2], brackets[0], brackets[1], brackets[3])})
        with pytest.raises(ConfigError):
            compute_net(Decimal("1000"), False, 0, bad)
