from capra.core.hashing import hash_document, json_dumps_canonical


def test_json_dumps_canonical_sorted_and_ascii_policy() -> None:
    obj1 = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}, "label": "Salão"}
    obj2 = {"nested": {"x": 1, "y": 2}, "a": 1, "label": "Salão", "b": 2}
    s1 = json_dumps_canonical(obj1)
    assert s1 == json_dumps_canonical(obj2)
    # ensure_ascii=False keeps unicode as-is (no escape sequences)
    assert "Salão" in s1


def test_hash_document_order_invariant() -> None:
    doc_a = {"id": "vendas", "dimensions": {"LOJA": {"name": "loja"}, "TURNO": {"name": "turno"}}}
    doc_b = {"dimensions": {"TURNO": {"name": "turno"}, "LOJA": {"name": "loja"}}, "id": "vendas"}
    assert hash_document(doc_a) == hash_document(doc_b)
