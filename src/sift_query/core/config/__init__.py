# src/sift_query/core/config/__init__.py

"""
Camada de configuração do sift-query.

Responsabilidades do pacote:
    - Carregamento de arquivos YAML/JSON (defaults + overrides locais)
    - Deep-merge determinístico
    - Validação de settings por classe de query (`QuerySettings`)

Invariantes:
    - A configuração final é um dicionário puro (dict)
    - Conflitos estruturais são tratados como erro

Limites explícitos:
    - Não executa resoluções
    - Não interage com steps diretamente
"""
