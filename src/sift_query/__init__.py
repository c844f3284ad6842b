# src/sift_query/__init__.py
"""
sift-query: composição declarativa e condicional de consultas.

Uma classe de query declara um pipeline ordenado de steps condicionais;
cada step refina um scope opaco (um DataFrame, uma lista, um query
builder) conforme os parâmetros de entrada. Steps são gateados por
presença de chave, igualdade de valor ou predicados, podem ser
agrupados em sifters aninhados com defaults próprios e protegidos por
guards.

Arquitetura em alto nível:
    - declarations      → decorators usados no corpo de uma `Query`
    - base              → classe base `Query` (construtor, resolve, guards)
    - core.pipeline     → parâmetros, condições, nós, sequencer e estado
    - core.engine       → planejamento de nível e execução da resolução
    - core.config       → settings por classe e camadas de defaults em disco

Limites explícitos:
    - Não é um query planner nem uma camada de banco de dados
    - Não interpreta o scope: apenas encadeia ações do usuário
"""

from .core.config.loader import load_config
from .core.config.settings import QuerySettings, load_settings
from .core.engine.engine import ResolutionResult
from .core.exceptions import (
    GuardViolationError,
    InvalidDeclarationError,
    QueryException,
    UndefinedSubjectError,
    UnknownAttributeError,
)
from .core.pipeline.params import ParamContext
from .core.pipeline.scope import to_mapping
from .core.pipeline.types import Position
from .declarations import defaults, guard, query, query_by, sift_by, sifter, subject
from .base import Query

__all__ = [
    "Query",
    "subject",
    "query",
    "query_by",
    "sift_by",
    "sifter",
    "defaults",
    "guard",
    "Position",
    "ParamContext",
    "ResolutionResult",
    "QuerySettings",
    "load_settings",
    "load_config",
    "to_mapping",
    "QueryException",
    "UndefinedSubjectError",
    "GuardViolationError",
    "UnknownAttributeError",
    "InvalidDeclarationError",
]
