from app.utils.cache_keys import PRODUCTS_BY_CATEGORY, build_key, entity_key


def test_parameter_order_does_not_matter():
    a = build_key(PRODUCTS_BY_CATEGORY, category="fruits", page=2, limit=10)
    b = build_key(PRODUCTS_BY_CATEGORY, limit=10, page=2, category="fruits")
    assert a == b


def test_every_parameter_is_a_key_dimension():
    base = build_key(PRODUCTS_BY_CATEGORY, category="fruits", page=2, limit=10)
    assert base != build_key(PRODUCTS_BY_CATEGORY, category="fruits", page=2, limit=20)
    assert base != build_key(PRODUCTS_BY_CATEGORY, category="fruits", page=3, limit=10)
    assert base != build_key(PRODUCTS_BY_CATEGORY, category="drinks", page=2, limit=10)
    assert base != build_key("products:top", category="fruits", page=2, limit=10)


def test_strings_are_trimmed_and_case_folded():
    assert build_key("s", search=" Apple ") == build_key("s", search="apple")


def test_numbers_have_one_canonical_form():
    assert build_key("p", min_price=0, max_price=200) == build_key("p", min_price=0.0, max_price=200.0)
    assert build_key("p", min_price=0.5) != build_key("p", min_price=5)


def test_none_parameters_are_dropped():
    assert build_key("op", page=None) == build_key("op") == "op"


def test_separators_in_values_cannot_collide():
    assert build_key("s", search="a&page=2") != build_key("s", search="a", page=2)
    assert build_key("s", a="1", b="2") != build_key("s", a="1&b=2")


def test_entity_key_keeps_identity_exact():
    assert entity_key("user-profile", "AbC") == "user-profile:AbC"
    assert entity_key("user-profile", "AbC") != entity_key("user-profile", "abc")
    assert entity_key("user-profile", "u1") != entity_key("user-cart", "u1")
