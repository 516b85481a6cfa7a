import pytest

from preco_facil.services.normalization import (
    normalize_text,
    strip_accents,
    trigram_similarity,
    trigrams,
)


def test_strip_accents_portuguese():
    assert strip_accents("Feijão") == "Feijao"
    assert strip_accents("Açúcar Refinado") == "Acucar Refinado"
    assert strip_accents("café") == "cafe"


def test_normalize_text_lowercases_then_strips():
    assert normalize_text("CAFÉ Pilão") == "cafe pilao"
    assert normalize_text("Café") == normalize_text("cafe")


def test_normalize_text_empty():
    assert normalize_text(None) == ""
    assert normalize_text("") == ""


def test_trigrams_pad_each_word():
    assert trigrams("cat") == {"  c", " ca", "cat", "at "}


def test_trigrams_ignore_punctuation():
    assert trigrams("a-b") == trigrams("a b")


def test_identical_strings_have_similarity_one():
    assert trigram_similarity("arroz", "arroz") == 1.0


def test_disjoint_strings_have_similarity_zero():
    assert trigram_similarity("arroz", "leite") == 0.0


def test_empty_side_has_similarity_zero():
    assert trigram_similarity("", "arroz") == 0.0
    assert trigram_similarity("arroz", None) == 0.0


@pytest.mark.parametrize(
    "query,name",
    [
        ("aroz", "arroz"),
        ("feijao", "feijao preto"),
    ],
)
def test_close_spellings_clear_default_threshold(query: str, name: str):
    assert trigram_similarity(query, name) > 0.3


def test_unrelated_word_below_default_threshold():
    assert trigram_similarity("arroz", "feijao") <= 0.3
