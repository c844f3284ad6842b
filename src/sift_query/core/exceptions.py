"""
sift-query — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do sift-query.

Objetivo:
- Permitir que engine e declarações levantem exceções semânticas tipadas
- Manter o mapeamento determinístico para `QueryErrorPayload`
- Evitar ValueError/RuntimeError genéricos nos pontos críticos

Regras:
- Exceções carregam apenas dados estruturados (serializáveis).
- `ResolutionHalted` é sinal interno da política "record" e nunca
  escapa de `Query.resolve()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import QueryErrorPayload


@dataclass(eq=False)
class QueryException(Exception):
    """Base class para exceções do sift-query.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_payload(cls, payload: QueryErrorPayload) -> "QueryException":
        return cls(
            message=payload.message,
            details=dict(payload.details),
            hint=payload.hint,
        )


# ---------------------------------------------------------------------------
# Resolução
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class UndefinedSubjectError(QueryException):
    """Nenhum scope base disponível no momento do resolve."""


@dataclass(eq=False)
class GuardViolationError(QueryException):
    """Guard falhou com a política `raise_on_guard_violation = True`."""


# ---------------------------------------------------------------------------
# Construção / Declaração
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class UnknownAttributeError(QueryException, TypeError):
    """Construtor recebeu atributo não declarado em `attributes`."""


@dataclass(eq=False)
class InvalidDeclarationError(QueryException, ValueError):
    """Declaração de step, sifter, guard ou defaults inválida."""


class ResolutionHalted(Exception):
    """Interrompe a resolução corrente após violação registrada (policy record)."""

    def __init__(self, payload: QueryErrorPayload):
        super().__init__(payload.message)
        self.payload = payload
