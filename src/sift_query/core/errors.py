"""
sift-query — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do sift-query.
Erros fazem parte do contrato operacional da biblioteca e devem ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

As exceções tipadas (`core.exceptions`) são sempre construídas a partir
de um payload deste módulo, e a política de guard "record" guarda o
payload no resultado da resolução em vez de levantar.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QueryErrorPayload:
    """
    Payload canônico de erro do sift-query.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida a quem declara a query (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Resolução
UNDEFINED_SUBJECT = "UNDEFINED_SUBJECT"
GUARD_VIOLATION = "GUARD_VIOLATION"

# Construção / Declaração
UNKNOWN_ATTRIBUTE = "UNKNOWN_ATTRIBUTE"
INVALID_DECLARATION = "INVALID_DECLARATION"

DEFAULT_VIOLATION_MESSAGE = "guard block violated"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def undefined_subject(
    *,
    query: str,
    hint: str = "Declare um método @subject na query ou passe `scope=` no construtor.",
) -> QueryErrorPayload:
    return QueryErrorPayload(
        type=UNDEFINED_SUBJECT,
        message=f"{query} has no base scope to resolve",
        details={"query": query},
        hint=hint,
    )


def guard_violation(
    *,
    query: str,
    message: Optional[str] = None,
    step: Optional[str] = None,
    depth: int = 0,
) -> QueryErrorPayload:
    return QueryErrorPayload(
        type=GUARD_VIOLATION,
        message=message or DEFAULT_VIOLATION_MESSAGE,
        details={
            "query": query,
            "step": step,
            "depth": depth,
        },
        hint="Ajuste os parâmetros ou o scope base para satisfazer o guard.",
    )


def unknown_attribute(
    *,
    query: str,
    unknown: List[str],
    declared: List[str],
) -> QueryErrorPayload:
    return QueryErrorPayload(
        type=UNKNOWN_ATTRIBUTE,
        message=f"{query} got unknown attributes: {', '.join(unknown)}",
        details={
            "query": query,
            "unknown": list(unknown),
            "declared": list(declared),
        },
        hint="Declare o atributo em `attributes` ou remova-o da chamada.",
    )


def invalid_declaration(
    *,
    message: str,
    declaration: Optional[str] = None,
    hint: Optional[str] = None,
) -> QueryErrorPayload:
    return QueryErrorPayload(
        type=INVALID_DECLARATION,
        message=message,
        details={"declaration": declaration},
        hint=hint,
    )
