# src/sift_query/core/pipeline/params.py
"""
Contexto de parâmetros da resolução.

Este módulo define o `ParamContext`, a visão efetiva dos parâmetros de
entrada de uma query: o mapeamento explícito recebido pelo construtor
(ou por `resolve(overrides)`) sobreposto a zero ou mais camadas de
defaults declaradas na classe e nos sifters.

Política de lookup (v1):
    - chave presente no mapeamento explícito → valor explícito, mesmo
      que seja "" ou None
    - caso contrário → primeira camada de defaults que define a chave,
      da mais interna (última empilhada) para a mais externa
    - caso contrário → ausente

Princípios fundamentais:
    - O contexto é imutável: overrides e camadas produzem novos contextos
    - Valores explícitos sempre vencem qualquer default
    - Defaults apenas preenchem lacunas, nunca mutam o explícito

Invariantes:
    - `explicit` é uma cópia própria (mutar o dict original não afeta o contexto)
    - A ordem de `layers` é externa → interna
    - A mesma entrada sempre produz a mesma visão efetiva

Limites explícitos:
    - Não avalia condições de steps (ver `conditions`)
    - Não avalia factories de defaults (o engine entrega camadas prontas)
    - Não interpreta valores de parâmetros
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple


def is_blank(value: Any) -> bool:
    """Valor que não conta como "presente" para condições de presença."""
    return value is None or (isinstance(value, str) and value == "")


@dataclass(frozen=True, eq=False)
class ParamContext(Mapping):
    """
    Visão imutável e efetiva dos parâmetros de uma resolução.

    Implementa o protocolo `Mapping`, então pode ser lida como um dict
    (`params["foo"]`, `params.get("foo")`, `dict(params)`) e comparada
    diretamente com dicionários simples.

    Campos:
        - explicit: parâmetros explícitos (construtor ⊕ overrides)
        - layers: camadas de defaults, da mais externa para a mais interna
    """

    explicit: Dict[str, Any] = field(default_factory=dict)
    layers: Tuple[Mapping, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.explicit, Mapping):
            raise TypeError(
                f"params must be a mapping (type={type(self.explicit).__name__})"
            )
        object.__setattr__(self, "explicit", dict(self.explicit))
        object.__setattr__(self, "layers", tuple(self.layers))

    # -----------------------------
    # Lookup
    # -----------------------------
    def lookup(self, key: str) -> Tuple[bool, Any]:
        if key in self.explicit:
            return True, self.explicit[key]
        for layer in reversed(self.layers):
            if key in layer:
                return True, layer[key]
        return False, None

    def is_present(self, key: str) -> bool:
        found, value = self.lookup(key)
        return found and not is_blank(value)

    # -----------------------------
    # Derivação
    # -----------------------------
    def with_overrides(self, overrides: Mapping) -> "ParamContext":
        merged = dict(self.explicit)
        merged.update(overrides)
        return ParamContext(explicit=merged, layers=self.layers)

    def push_layer(self, layer: Mapping) -> "ParamContext":
        if not isinstance(layer, Mapping):
            raise TypeError(
                f"defaults layer must be a mapping (type={type(layer).__name__})"
            )
        return ParamContext(explicit=self.explicit, layers=self.layers + (dict(layer),))

    # -----------------------------
    # Mapping protocol
    # -----------------------------
    def __getitem__(self, key: str) -> Any:
        found, value = self.lookup(key)
        if not found:
            raise KeyError(key)
        return value

    def __iter__(self) -> Iterator[str]:
        seen: List[str] = list(self.explicit)
        for layer in reversed(self.layers):
            seen.extend(k for k in layer if k not in seen)
        return iter(seen)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"ParamContext({dict(self)!r}, layers={len(self.layers)})"
