"""Fee rule source factory.

Provides get_fee_rules() / set_fee_rules() to swap implementations:
- RepositoryFeeRuleSource, reading order cycle exchanges and enterprise fees
- StaticFeeRuleSource for tests with fixed fee rates
"""

from ordering.fee_rules.port import FeeRuleSource

_current_fee_rules: FeeRuleSource | None = None


def get_fee_rules() -> FeeRuleSource:
    """Return the current fee rule source. Defaults to the repository-backed one."""
    global _current_fee_rules
    if _current_fee_rules is None:
        from ordering.fee_rules.repository_adapter import RepositoryFeeRuleSource

        _current_fee_rules = RepositoryFeeRuleSource()
    return _current_fee_rules


def set_fee_rules(fee_rules: FeeRuleSource) -> None:
    """Override the active fee rule source (useful for tests)."""
    global _current_fee_rules
    _current_fee_rules = fee_rules


def reset_fee_rules() -> None:
    """Reset to the default fee rule source."""
    global _current_fee_rules
    _current_fee_rules = None
