# src/sift_query/core/pipeline/__init__.py
"""
# Pipeline Core — sift-query

Estruturas fundamentais de um pipeline de query.

## Componentes

- **params**
  - `ParamContext`: parâmetros explícitos sobre camadas de defaults
- **conditions**
  - `Always`, `KeyPresent`, `KeyEquals`, `Predicate`, `AllOf`
- **types**
  - `Position`, `StepKind`, `StepStatus`, `StepOutcome`, `Guard`
- **step**
  - `Step`, `Sifter`, `DefaultsLayer`
- **registry**
  - `StepSequencer`: ordem incremental (first / middle / last)
- **context**
  - `ResolutionState`: estado e log estruturado de uma resolução
  - `ResolutionHost`: contrato de quem ativa o estado (a query)
- **template**
  - `QueryTemplate`: tudo o que uma classe de query declarou
- **scope**
  - `to_mapping`: apresentação do scope resolvido como dict

## Invariantes

- Nós e templates são imutáveis após o registro
- Valores explícitos sempre vencem defaults

## Limites Explícitos

- Não executa steps (ver `core.engine`)
"""
