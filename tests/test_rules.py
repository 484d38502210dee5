import pytest

from flowvault.runtime.context import ContextStore
from flowvault.vault.errors import (
    AssignmentFailed,
    ConfigurationMissing,
    GroupNotFound,
    NoRulesConfigured,
    OutputFormatInvalid,
    PropertyNotFound,
    RuleMalformed,
    ScopeInvalid,
)
from flowvault.vault.rules import RetrievalRule, RuleEngine, parse_output, rules_from_config
from tests.conftest import API_STORE


def rules(*triples):
    return [RetrievalRule(g, p, o) for g, p, o in triples]


@pytest.fixture
def flow():
    return ContextStore("flow:default")


@pytest.fixture
def global_context():
    return ContextStore("global")


@pytest.fixture
def engine(make_vault):
    return RuleEngine(make_vault(API_STORE))


def test_resolves_into_message(engine, flow, global_context):
    msg = {"payload": "keep"}
    out = engine.apply(
        rules(
            ("apiService", "baseUrl", "msg.baseUrl"),
            ("apiService", "apiKey", "msg.apiKey"),
        ),
        msg, flow, global_context,
    )

    assert out is msg
    assert msg == {"payload": "keep", "baseUrl": "http://x", "apiKey": "k1"}


def test_nested_message_path(engine, flow, global_context):
    msg = {"user": {"id": 7}}
    engine.apply(rules(("db", "host", "msg.user.name")), msg, flow, global_context)

    assert msg["user"] == {"id": 7, "name": "db.local"}


def test_flow_and_global_targets(engine, flow, global_context):
    msg = {}
    engine.apply(
        rules(
            ("apiService", "baseUrl", "flow.apiUrl"),
            ("db", "port", "global.db.port"),
        ),
        msg, flow, global_context,
    )

    assert msg == {}
    assert flow.get("apiUrl") == "http://x"
    assert global_context.get("db") == {"port": 5432}


def test_invalid_scope(engine, flow, global_context):
    with pytest.raises(ScopeInvalid) as exc_info:
        engine.apply(rules(("db", "host", "bogus.x")), {}, flow, global_context)
    assert "bogus" in str(exc_info.value)


@pytest.mark.parametrize("output", ["msg", "host", "msg.", "msg..x", ".x"])
def test_invalid_output_format(engine, flow, global_context, output):
    with pytest.raises(OutputFormatInvalid):
        engine.apply(rules(("db", "host", output)), {}, flow, global_context)


def test_lookup_misses(engine, flow, global_context):
    with pytest.raises(GroupNotFound) as exc_info:
        engine.apply(rules(("nope", "host", "msg.x")), {}, flow, global_context)
    assert "nope" in str(exc_info.value)

    with pytest.raises(PropertyNotFound) as exc_info:
        engine.apply(rules(("db", "nope", "msg.x")), {}, flow, global_context)
    assert "db" in str(exc_info.value) and "nope" in str(exc_info.value)


def test_preconditions(make_vault, flow, global_context):
    with pytest.raises(ConfigurationMissing):
        RuleEngine(None).apply(rules(("db", "host", "msg.x")), {}, flow, global_context)
    with pytest.raises(NoRulesConfigured):
        RuleEngine(make_vault(API_STORE)).apply([], {}, flow, global_context)


def test_malformed_rule_reports_index(engine, flow, global_context):
    with pytest.raises(RuleMalformed) as exc_info:
        engine.apply(
            rules(("db", "host", "msg.a"), ("db", "", "msg.b")),
            {}, flow, global_context,
        )
    assert exc_info.value.index == 1
    assert exc_info.value.missing == "property"


def test_assignment_through_scalar_fails(engine, flow, global_context):
    msg = {"user": "alice"}
    with pytest.raises(AssignmentFailed) as exc_info:
        engine.apply(rules(("db", "host", "msg.user.name")), msg, flow, global_context)

    assert "msg.user.name" in str(exc_info.value)
    assert msg == {"user": "alice"}


def test_first_failure_stops_without_rollback(engine, flow, global_context):
    with pytest.raises(GroupNotFound):
        engine.apply(
            rules(
                ("db", "host", "flow.host"),
                ("missing", "x", "msg.x"),
                ("db", "port", "flow.port"),
            ),
            {}, flow, global_context,
        )

    # Earlier write stays; later rule never ran
    assert flow.get("host") == "db.local"
    assert flow.get("port") is None


def test_idempotent(engine, flow, global_context):
    rule_list = rules(("db", "options", "msg.options"), ("db", "tls", "msg.tls"))
    first = engine.apply(rule_list, {}, flow, global_context)
    second = engine.apply(rule_list, {}, flow, global_context)

    assert first == second == {"options": {"pool": 5}, "tls": True}


def test_resolved_values_do_not_alias_store(engine, flow, global_context):
    msg = engine.apply(rules(("db", "options", "msg.options")), {}, flow, global_context)
    msg["options"]["pool"] = 0

    assert engine.resolve(RetrievalRule("db", "options", "msg.x")) == {"pool": 5}


def test_rules_from_config_accepts_domain():
    parsed = rules_from_config({"rules": [{"domain": "db", "property": "host", "output": "msg.h"}]})
    assert parsed == [RetrievalRule("db", "host", "msg.h")]


def test_rules_from_config_single_legacy_triple():
    parsed = rules_from_config({"domain": "db", "property": "host", "output": "msg.h"})
    assert parsed == [RetrievalRule("db", "host", "msg.h")]
    assert rules_from_config({}) == []


def test_non_dict_rule_is_malformed(engine, flow, global_context):
    with pytest.raises(RuleMalformed) as exc_info:
        engine.apply(rules_from_config({"rules": ["db.host"]}), {}, flow, global_context)
    assert exc_info.value.missing == "group"


def test_parse_output():
    scope, path = parse_output("msg.user.name")
    assert scope.value == "msg"
    assert path == "user.name"


def test_flow_assignment_through_scalar_fails(engine, flow, global_context):
    flow.set("a", 1)
    with pytest.raises(AssignmentFailed) as exc_info:
        engine.apply(rules(("db", "host", "flow.a.b")), {}, flow, global_context)

    assert "flow.a.b" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, TypeError)
    assert flow.get("a") == 1


@pytest.mark.parametrize("output", ["global.vault", "global.vault.host"])
def test_lookup_key_is_reserved_in_global(engine, flow, global_context, output):
    lookup = object()
    global_context.publish("vault", lookup)

    with pytest.raises(AssignmentFailed) as exc_info:
        engine.apply(rules(("db", "host", output)), {}, flow, global_context)

    assert "reserved" in str(exc_info.value)
    assert global_context.get("vault") is lookup
