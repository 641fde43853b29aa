"""Rules package."""

from __future__ import annotations

import re

from prols.config import ConfigError, RuleConfig
from prols.rules.base import Matcher, Rule
from prols.rules.matchers import (
    BinaryMatcher,
    GlobMatcher,
    PrefixMatcher,
    RegexMatcher,
    SuffixMatcher,
)

__all__ = [
    "BinaryMatcher",
    "GlobMatcher",
    "Matcher",
    "PrefixMatcher",
    "RegexMatcher",
    "Rule",
    "SuffixMatcher",
    "build_rule",
    "build_rules",
    "needs_binary_detection",
]


def build_rules(rule_configs: list[RuleConfig]) -> list[Rule]:
    """Compile configured rules in declared order."""
    return [build_rule(item, index=index) for index, item in enumerate(rule_configs)]


def build_rule(rule_config: RuleConfig, *, index: int = 0) -> Rule:
    """Compile a single configured rule into its matcher variants."""
    matchers: list[Matcher] = []
    if rule_config.glob is not None:
        matchers.append(GlobMatcher(rule_config.glob))
    if rule_config.regex is not None:
        matchers.append(RegexMatcher(_compile_regex(rule_config.regex, index)))
    if rule_config.prefix is not None:
        matchers.append(PrefixMatcher(rule_config.prefix))
    if rule_config.suffix is not None:
        matchers.append(SuffixMatcher(rule_config.suffix))
    if rule_config.binary is not None:
        matchers.append(BinaryMatcher(rule_config.binary))
    if not matchers:
        raise ConfigError(f"rules[{index}] has no match conditions")

    return Rule(
        name=rule_config.name or f"rule#{index + 1}",
        score=rule_config.score,
        matchers=tuple(matchers),
    )


def needs_binary_detection(rules: list[Rule]) -> bool:
    """Return True when any rule keys on the binary flag."""
    return any(rule.inspects_binary for rule in rules)


def _compile_regex(pattern: str, index: int) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"rules[{index}].regex is invalid: {exc}") from exc
