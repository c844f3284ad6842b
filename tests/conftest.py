# tests/conftest.py
"""
Fixtures compartilhados para testes do sift-query.

Este módulo define fixtures reutilizáveis que fornecem:
- conteúdo YAML de settings (defaults + override local)
- um ResolutionState determinístico para testes do core
- uma fábrica de steps simples que registram sua execução

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas
    - Scopes de teste são dicts: cada ação devolve um novo dict

Invariantes:
    - Nenhuma fixture realiza I/O (arquivos ficam a cargo de `tmp_path`)
    - Nenhuma fixture depende de pandas

Limites explícitos:
    - Não substituir testes de integração (ver tests/e2e)
"""

import pytest


# =====================================================
# Config / settings fixtures
# =====================================================

@pytest.fixture
def query_settings_defaults_yaml() -> str:
    """
    YAML típico de um `query.defaults.yaml`.

    Contém a seção `query` completa, mais uma seção de defaults de
    parâmetros usada por `defaults(load_config(...))`.

    Returns:
        str: Conteúdo YAML de defaults.
    """
    return """\
query:
  raise_on_guard_violation: true
  subject_name: scope
params:
  status: active
  limit: 10
"""


@pytest.fixture
def query_settings_local_yaml() -> str:
    """YAML de override local: desliga o raise e troca o alias do scope."""
    return """\
query:
  raise_on_guard_violation: false
  subject_name: relation
params:
  limit: 25
"""


# =====================================================
# Pipeline fixtures
# =====================================================

@pytest.fixture
def make_state():
    """
    Fixture factory que cria um `ResolutionState` determinístico.

    O `resolution_id` é fixo para que asserts sobre eventos não dependam
    de uuid. Parâmetros e scope são injetados pelo teste.

    Returns:
        Callable[..., ResolutionState]
    """
    from sift_query.core.pipeline.context import ResolutionState
    from sift_query.core.pipeline.params import ParamContext

    def _make(params=None, scope=None, raise_on_violation=True):
        return ResolutionState(
            query="TestQuery",
            params=ParamContext(explicit=params or {}),
            scope=scope,
            raise_on_violation=raise_on_violation,
            resolution_id="res-test-001",
        )

    return _make


@pytest.fixture
def tagging_step():
    """
    Fixture factory de `Step` cuja ação acrescenta um marcador ao scope.

    O scope é uma lista; cada ação devolve uma nova lista com seu nome
    anexado, o que permite verificar a ordem efetiva de execução.

    Returns:
        Callable[..., Step]
    """
    from sift_query.core.pipeline.step import Step

    def _make(name, **kwargs):
        def action(host, scope, *args):
            return list(scope) + [name]

        return Step(name=name, action=action, **kwargs)

    return _make


class StubHost:
    """Host mínimo para o engine: empilha estados como a `Query` faz."""

    def __init__(self):
        self.states = []

    def activate(self, state):
        from contextlib import contextmanager

        @contextmanager
        def _active():
            self.states.append(state)
            try:
                yield
            finally:
                self.states.pop()

        return _active()


@pytest.fixture
def stub_host():
    return StubHost()
