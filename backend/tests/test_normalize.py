"""Tests for name normalization."""
import pytest

from app.utils.normalize import clean_names, normalize_name, normalize_names


class TestNormalizeName:
    """Title casing with lowercase stop words."""

    @pytest.mark.parametrize("raw, expected", [
        ("MC KEVIN DA SILVA", "Mc Kevin da Silva"),
        ("the end of the road", "The End of the Road"),
        ("a day in the life", "A Day in the Life"),
        ("noite de verão", "Noite de Verão"),
        ("samba e amor", "Samba e Amor"),
        ("what are you waiting for", "What Are You Waiting For"),
        ("ANITTA", "Anitta"),
    ])
    def test_title_case(self, raw, expected):
        assert normalize_name(raw) == expected

    def test_stop_word_first_and_last_capitalized(self):
        """Stop words at either end of a name are capitalized."""
        assert normalize_name("of mice and of") == "Of Mice and Of"

    def test_single_word(self):
        assert normalize_name("da") == "Da"

    def test_empty(self):
        assert normalize_name("") == ""

    def test_idempotent(self):
        """Normalizing twice gives the same result."""
        for raw in ["MC KEVIN DA SILVA", "the end of the road", "ÁGUA DE COCO"]:
            once = normalize_name(raw)
            assert normalize_name(once) == once

    def test_repeated_spaces_kept(self):
        """Words are split on single spaces, so runs of spaces survive."""
        assert normalize_name("dj  marlboro") == "Dj  Marlboro"

    def test_accented_first_letter(self):
        assert normalize_name("ÉRIKA") == "Érika"


class TestNormalizeNames:

    def test_keeps_order(self):
        assert normalize_names(["zeca pagodinho", "ALCIONE"]) == ["Zeca Pagodinho", "Alcione"]

    def test_empty_list(self):
        assert normalize_names([]) == []


class TestCleanNames:

    def test_strips_and_drops_blank(self):
        assert clean_names([" kevin ", "  ", "", "dj guuga"]) == ["Kevin", "Dj Guuga"]

    def test_all_blank(self):
        assert clean_names([" ", ""]) == []
