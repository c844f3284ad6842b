# src/sift_query/core/__init__.py
"""
Core do sift-query.

Este pacote contém a implementação independente da superfície
declarativa: tudo o que é necessário para representar um pipeline já
declarado e resolvê-lo contra um scope.

Componentes principais:
    - pipeline → ParamContext, condições, steps/sifters, sequencer e estado
    - engine   → planejamento de nível e execução com política de guards
    - config   → loader YAML/JSON, deep-merge e settings por classe
    - errors / exceptions → payloads canônicos e exceções tipadas

Princípios fundamentais:
    - Templates são imutáveis depois da declaração
    - Cada resolução tem estado próprio e rastreável
    - O scope é opaco para o core

Limites explícitos:
    - Não define decorators nem a classe `Query`
    - Não depende de pandas ou de qualquer tipo de scope concreto
"""
