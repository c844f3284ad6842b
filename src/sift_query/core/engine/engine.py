# src/sift_query/core/engine/engine.py
"""
Engine de resolução do sift-query.

O Engine recebe o template imutável de uma classe de query, o host (a
instância da query, exposta às ações e predicados) e executa uma
resolução completa:

    1. constrói o ParamContext efetivo (explícito + camadas de defaults)
    2. avalia os guards da query uma única vez
    3. percorre os nós do nível raiz na ordem do planner
    4. para cada nó: condição (ou `force`) → guard → ação / sifter
    5. devolve o scope final, ou nenhum scope se um guard interrompeu

Política de guards:
    - `raise_on_guard_violation = True` (padrão): `GuardViolationError`
      aborta a resolução sem resultado parcial
    - `raise_on_guard_violation = False`: a mensagem é registrada no
      estado, a resolução para e o resultado não carrega scope

Sifters rodam contra o **mesmo** objeto de scope do nível externo;
cross-resolution (`host.resolve(...)` dentro de uma ação) cria outro
Engine.run com estado próprio, sem tocar no estado em andamento.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from sift_query.core.errors import QueryErrorPayload, guard_violation
from sift_query.core.exceptions import GuardViolationError, ResolutionHalted
from sift_query.core.pipeline.context import ResolutionHost, ResolutionState
from sift_query.core.pipeline.params import ParamContext
from sift_query.core.pipeline.scope import to_mapping
from sift_query.core.pipeline.step import DefaultsLayer, Node, Sifter, Step
from sift_query.core.pipeline.template import QueryTemplate
from sift_query.core.pipeline.types import Guard, StepKind, StepOutcome, StepStatus

from .planner import plan_execution


ROOT_STEP_ID = "<query>"


@dataclass(frozen=True)
class ResolutionResult:
    """Resultado agregado de uma resolução."""

    scope: Any
    violation: Optional[str] = None
    halted: bool = False
    error: Optional[QueryErrorPayload] = None
    outcomes: Tuple[StepOutcome, ...] = ()
    events: Tuple[Dict[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return to_mapping(self.scope)

    def applied(self) -> Tuple[str, ...]:
        return tuple(o.step_id for o in self.outcomes if o.status is StepStatus.APPLIED)


def enforce_guard(
    state: ResolutionState,
    *,
    passed: Any,
    message: Optional[str],
    step_id: str,
    kind: StepKind = StepKind.QUERY,
) -> None:
    """Aplica a política de guard da query ao resultado de um predicado.

    Usado tanto pelo engine (guards declarados) quanto por `Query.guard`
    (guards chamados de dentro de uma ação).
    """
    if passed:
        state.log(step_id=step_id, level="DEBUG", message="guard passed")
        return

    payload = guard_violation(
        query=state.query,
        message=message,
        step=step_id,
        depth=state.depth,
    )
    state.log(step_id=step_id, level="ERROR", message=payload.message, guard="violated")

    if state.raise_on_violation:
        raise GuardViolationError.from_payload(payload)

    state.halt(payload)
    state.record(step_id=step_id, kind=kind, status=StepStatus.HALTED, summary=payload.message)
    raise ResolutionHalted(payload)


class ResolutionEngine:
    """Engine canônico do sift-query (planner + executor de um template)."""

    def __init__(
        self,
        *,
        template: QueryTemplate,
        host: ResolutionHost,
        raise_on_guard_violation: bool = True,
    ):
        self.template = template
        self.host = host
        self.raise_on_guard_violation = bool(raise_on_guard_violation)

    def run(self, *, params: Mapping, scope: Any) -> ResolutionResult:
        state = ResolutionState(
            query=type(self.host).__name__,
            params=ParamContext(explicit=params),
            scope=scope,
            raise_on_violation=self.raise_on_guard_violation,
        )
        state.log(
            step_id=ROOT_STEP_ID,
            level="INFO",
            message="resolution started",
            params=sorted(str(k) for k in state.params.explicit),
        )

        with self.host.activate(state):
            try:
                state.params = self._layered(state.params, self.template.defaults)
                for guard in self.template.guards:
                    self._check(guard, state, step_id=ROOT_STEP_ID, args=())
                self._run_nodes(plan_execution(self.template.sequencer), state)
            except ResolutionHalted:
                pass

        if state.halted:
            state.log(step_id=ROOT_STEP_ID, level="WARNING", message="resolution halted by guard")
        else:
            state.log(step_id=ROOT_STEP_ID, level="INFO", message="resolution finished")

        return ResolutionResult(
            scope=None if state.halted else state.scope,
            violation=state.violation,
            halted=state.halted,
            error=state.error,
            outcomes=tuple(state.outcomes),
            events=tuple(state.events),
        )

    # ------------------------------------------------------------------
    # Execução de nós
    # ------------------------------------------------------------------
    def _run_nodes(self, nodes: Sequence[Node], state: ResolutionState) -> None:
        for node in nodes:
            # uma ação pode capturar o ResolutionHalted; o estado continua valendo
            if state.halted:
                return
            if isinstance(node, Sifter):
                self._run_sifter(node, state)
            else:
                self._run_step(node, state)

    def _should_apply(self, node: Node, state: ResolutionState) -> bool:
        if node.force:
            return True
        return bool(node.condition.is_satisfied(state.params, self.host))

    def _run_step(self, step: Step, state: ResolutionState) -> None:
        if not self._should_apply(step, state):
            state.record(
                step_id=step.name,
                kind=step.kind,
                status=StepStatus.SKIPPED,
                summary=f"skipped: {step.condition.describe()}",
            )
            return

        args: Tuple[Any, ...] = ()
        if step.key is not None:
            args = (state.params.get(step.key),)

        if step.guard is not None:
            self._check(step.guard, state, step_id=step.name, args=args)

        outer_step, state.active_step = state.active_step, step.name
        try:
            state.scope = step.action(self.host, state.scope, *args)
        finally:
            state.active_step = outer_step
        if state.halted:
            return
        state.record(
            step_id=step.name,
            kind=step.kind,
            status=StepStatus.APPLIED,
            summary="forced" if step.force else "applied",
        )

    def _run_sifter(self, sifter: Sifter, state: ResolutionState) -> None:
        if not self._should_apply(sifter, state):
            # subárvore inteira ignorada: condições internas nem são avaliadas
            state.record(
                step_id=sifter.name,
                kind=sifter.kind,
                status=StepStatus.SKIPPED,
                summary=f"skipped: {sifter.condition.describe()}",
            )
            return

        args: Tuple[Any, ...] = ()
        if sifter.key is not None:
            args = (state.params.get(sifter.key),)

        if sifter.guard is not None:
            self._check(sifter.guard, state, step_id=sifter.name, args=args, kind=sifter.kind)

        nested = self._layered(state.params, sifter.defaults)
        with state.nested(nested):
            for guard in sifter.guards:
                self._check(guard, state, step_id=sifter.name, args=(), kind=sifter.kind)
            self._run_nodes(plan_execution(sifter.sequencer), state)

        if state.halted:
            return
        state.record(
            step_id=sifter.name,
            kind=sifter.kind,
            status=StepStatus.APPLIED,
            summary="forced" if sifter.force else "applied",
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _layered(self, params: ParamContext, layers: Sequence[DefaultsLayer]) -> ParamContext:
        for layer in layers:
            params = params.push_layer(layer.build(self.host))
        return params

    def _check(
        self,
        guard: Guard,
        state: ResolutionState,
        *,
        step_id: str,
        args: Tuple[Any, ...],
        kind: StepKind = StepKind.QUERY,
    ) -> None:
        enforce_guard(
            state,
            passed=guard.predicate(self.host, *args),
            message=guard.message,
            step_id=step_id,
            kind=kind,
        )
