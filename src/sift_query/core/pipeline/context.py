# src/sift_query/core/pipeline/context.py
"""
Estado mutável de uma resolução.

Este módulo define o `ResolutionState`, a estrutura criada a cada
chamada de `resolve()` (inclusive chamadas aninhadas de
cross-resolution) e descartada quando a chamada retorna.

O ResolutionState atua como o único meio permitido de:
    - carregar o scope corrente entre steps
    - expor o ParamContext efetivo do nível em execução
    - registrar a mensagem de violação da política "record"
    - registrar eventos de log estruturados e o destino de cada nó

Princípios fundamentais:
    - Isolamento por resolução (nenhum estado compartilhado entre chamadas)
    - Comunicação explícita e rastreável
    - Escrita única: só a resolução dona do estado o altera

Invariantes:
    - Logs sempre incluem `resolution_id` e `step_id`
    - `halted` implica `violation` preenchida
    - O ParamContext externo é restaurado ao sair de um sifter

Limites explícitos:
    - Não executa steps
    - Não decide políticas de guard
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ContextManager, Dict, Iterator, List, Optional, Protocol
from uuid import uuid4

from ..errors import QueryErrorPayload
from .params import ParamContext
from .types import StepKind, StepOutcome, StepStatus


def new_resolution_id() -> str:
    return uuid4().hex[:12]


@dataclass
class ResolutionState:
    """
    Estado de uma única chamada de `resolve()`.

    Campos canônicos:
    - resolution_id: identificador da resolução (aparece em todos os eventos)
    - query: nome da classe de query em resolução
    - params: ParamContext efetivo do nível corrente
    - scope: scope corrente, reatribuído a cada ação aplicada
    - raise_on_violation: política de guard da classe
    - violation / error: mensagem e payload da violação registrada
    - halted: resolução interrompida por guard (política "record")
    - depth: profundidade corrente de sifters
    - active_step: step cuja ação está em execução (guards em ação)
    - outcomes: destino de cada nó avaliado, em ordem
    - events: log estruturado de eventos
    """

    query: str
    params: ParamContext
    scope: Any
    raise_on_violation: bool = True
    resolution_id: str = field(default_factory=new_resolution_id)

    violation: Optional[str] = None
    error: Optional[QueryErrorPayload] = None
    halted: bool = False
    depth: int = 0
    active_step: Optional[str] = None

    outcomes: List[StepOutcome] = field(default_factory=list)
    events: List[Dict[str, Any]] = field(default_factory=list)

    # -----------------------------
    # Escopo de parâmetros (sifters)
    # -----------------------------
    @contextmanager
    def nested(self, params: ParamContext) -> Iterator[None]:
        outer_params, outer_depth = self.params, self.depth
        self.params = params
        self.depth = outer_depth + 1
        try:
            yield
        finally:
            self.params = outer_params
            self.depth = outer_depth

    # -----------------------------
    # Violação (política "record")
    # -----------------------------
    def halt(self, payload: QueryErrorPayload) -> None:
        self.violation = payload.message
        self.error = payload
        self.halted = True

    # -----------------------------
    # Logging & outcomes
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "resolution_id": self.resolution_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "depth": self.depth,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def record(self, *, step_id: str, kind: StepKind, status: StepStatus, summary: str) -> StepOutcome:
        outcome = StepOutcome(
            step_id=step_id,
            kind=kind,
            status=status,
            summary=summary,
            depth=self.depth,
        )
        self.outcomes.append(outcome)
        level = "WARNING" if status is StepStatus.HALTED else "DEBUG"
        self.log(step_id=step_id, level=level, message=summary, status=status.value)
        return outcome


class ResolutionHost(Protocol):
    """Dono do estado: torna um `ResolutionState` visível às ações enquanto ativo."""

    def activate(self, state: ResolutionState) -> ContextManager[None]:
        ...
