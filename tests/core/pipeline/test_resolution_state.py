# tests/core/pipeline/test_resolution_state.py
"""
Testes de logging estruturado e outcomes no ResolutionState.

Os testes asseguram que:
- eventos de log são estruturados e carregam `resolution_id`
- `record` acumula outcomes e também gera um evento
- `nested` troca o ParamContext e a profundidade, restaurando ao sair
- `halt` preenche violação e payload

Decisões arquiteturais:
    - Logs não são strings livres, mas eventos estruturados
    - O estado é o agregador de sinais da resolução
"""

import pytest

try:
    from sift_query.core.errors import guard_violation
    from sift_query.core.pipeline.params import ParamContext
    from sift_query.core.pipeline.types import StepKind, StepStatus
except Exception as e:  # noqa: BLE001
    guard_violation = None
    ParamContext = None
    StepKind = None
    StepStatus = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing ResolutionState API. Implement:\n"
            "- src/sift_query/core/pipeline/context.py (log, record, nested, halt)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_structured_log_event(make_state):
    """
    Verifica que `log` produz eventos estruturados.

    Invariantes:
        - Cada evento inclui `resolution_id`, `step_id`, `level`, `message`,
          `depth` e `timestamp`
        - Campos extras são preservados
    """
    _require_imports()
    state = make_state()
    state.log(step_id="by_status", level="INFO", message="hello", foo=1)

    event = state.events[-1]
    assert event["resolution_id"] == "res-test-001"
    assert event["step_id"] == "by_status"
    assert event["level"] == "INFO"
    assert event["message"] == "hello"
    assert event["depth"] == 0
    assert event["foo"] == 1
    assert "timestamp" in event


def test_record_appends_outcome_and_event(make_state):
    _require_imports()
    state = make_state()
    outcome = state.record(
        step_id="by_status",
        kind=StepKind.QUERY,
        status=StepStatus.SKIPPED,
        summary="skipped: present(status)",
    )

    assert state.outcomes == [outcome]
    assert outcome.depth == 0
    assert state.events[-1]["status"] == "skipped"
    assert state.events[-1]["level"] == "DEBUG"


def test_halted_outcome_is_logged_as_warning(make_state):
    _require_imports()
    state = make_state()
    state.record(step_id="g", kind=StepKind.QUERY, status=StepStatus.HALTED, summary="nope")
    assert state.events[-1]["level"] == "WARNING"


def test_nested_restores_outer_params_and_depth(make_state):
    """
    Verifica que sair de um nível aninhado restaura o contexto externo,
    inclusive quando o corpo levanta.
    """
    _require_imports()
    state = make_state(params={"a": 1})
    outer = state.params
    inner = outer.push_layer({"b": 2})

    with state.nested(inner):
        assert state.params is inner
        assert state.depth == 1
        state.log(step_id="inner", level="DEBUG", message="inside")

    assert state.params is outer
    assert state.depth == 0
    assert state.events[-1]["depth"] == 1

    with pytest.raises(RuntimeError):
        with state.nested(inner):
            raise RuntimeError("boom")
    assert state.params is outer
    assert state.depth == 0


def test_halt_records_violation(make_state):
    _require_imports()
    state = make_state()
    payload = guard_violation(query="TestQuery", message="too big", step="by_limit")
    state.halt(payload)

    assert state.halted is True
    assert state.violation == "too big"
    assert state.error is payload
    assert state.error.to_dict()["details"]["step"] == "by_limit"
