from storefront.core.slug import slugify


def test_slugify_lowercases_and_joins_words():
    assert slugify("Mens Clothing") == "mens-clothing"


def test_slugify_folds_accents():
    assert slugify("Café Crème 2") == "cafe-creme-2"


def test_slugify_collapses_punctuation_runs():
    assert slugify("  Phones, Tablets & More!! ") == "phones-tablets-more"


def test_slugify_is_deterministic():
    assert slugify("iPhone 13") == slugify("iPhone 13") == "iphone-13"


def test_slugify_empty():
    assert slugify("") == ""
    assert slugify(None) == ""
