# src/sift_query/core/pipeline/template.py
"""Template imutável de uma classe de query (construído na declaração)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from .registry import StepSequencer
from .step import DefaultsLayer
from .types import Guard


@dataclass(frozen=True)
class QueryTemplate:
    """
    Tudo o que a declaração de uma classe de query registra.

    Campos:
        - sequencer: nós do nível raiz, já ordenados de forma incremental
        - defaults: camadas de defaults do nível raiz (externa → interna)
        - guards: guards da query, avaliados uma vez antes do primeiro step
        - subject: factory do scope base `(host) -> scope`, se declarada
    """

    sequencer: StepSequencer = field(default_factory=StepSequencer)
    defaults: Tuple[DefaultsLayer, ...] = ()
    guards: Tuple[Guard, ...] = ()
    subject: Optional[Callable[[Any], Any]] = None
