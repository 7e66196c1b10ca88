import logging

from veriweb.app.heuristics import DEFAULT_RULES, EXTENDED_RULES
from veriweb.config import resolve_rules


def test_resolve_known_rule_sets():
    assert resolve_rules('default') == ('default', DEFAULT_RULES)
    assert resolve_rules(' Extended ') == ('extended', EXTENDED_RULES)


def test_unknown_rule_set_falls_back_to_default(caplog):
    with caplog.at_level(logging.WARNING, logger='config'):
        assert resolve_rules('aggressive') == ('default', DEFAULT_RULES)
    assert any('aggressive' in rec.getMessage() for rec in caplog.records)
