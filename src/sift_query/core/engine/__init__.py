# src/sift_query/core/engine/__init__.py
"""
Engine do sift-query.

Componentes principais:
    - planner → ordem linear de um nível (`first ++ middle ++ last`)
    - engine  → execução de uma resolução com política de guards

Invariantes:
    - Cada nó é avaliado no máximo uma vez por resolução
    - O resultado reflete explicitamente o destino de cada nó
"""
