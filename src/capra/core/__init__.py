"""
Core package aggregator for Capra schema contracts (grammar, models, errors, hashing).

## Contracts (single source of truth)
- Grammar — dimension/measure enums, key derivation and default MDX expression helpers.
- Schema — frozen pydantic models for dimensions, measures, categories, filter configs,
  parallel periods and the SchemaDocument that bundles them.
- Hashing — canonical JSON and document fingerprints.
- Constants/Errors/Typing — conventional defaults, typed exceptions, shared aliases.

## Notes
- Zero‑IO policy: stdlib + pydantic only; no file/network IO.
- Naming policy: dimension and measure keys are UPPER_SNAKE derived from the declared name;
  category keys are literal value codes; filter-config keys are literal config names.
- Built documents are frozen; sequences are stored as tuples.

## Downstream usage
- capra.builder — accumulates declarations and validates them into a SchemaDocument.
- capra.registry — stores documents by id and resolves semantic names to MDX expressions.
- Query translation and UI layers consume resolved strings via the registry only.

## Examples
```python
from capra.core.grammar import to_upper_key, default_hierarchy
to_upper_key("valorLiquido")  # 'VALOR_LIQUIDO'
default_hierarchy("loja")  # '[loja].[Todos].Children'
```
"""
