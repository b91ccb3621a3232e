from __future__ import annotations

from bgvariants.util.naming import parse_variant_tags, split_base


def test_split_base():
    assert split_base("hero.jpg") == ("hero", ".jpg")
    assert split_base("icons/hero.png") == ("hero", ".png")
    assert split_base("README") == ("README", "")


def test_base_file_has_no_tags():
    assert parse_variant_tags("hero", ".jpg", "hero.jpg") == []


def test_tags_in_filename_order():
    assert parse_variant_tags("hero", ".jpg", "hero.medium.jpg") == ["medium"]
    assert parse_variant_tags("hero", ".jpg", "hero.medium.2x.jpg") == ["medium", "2x"]
    assert parse_variant_tags("hero", ".jpg", "hero.2x.medium.jpg") == ["2x", "medium"]


def test_other_files_are_ignored():
    assert parse_variant_tags("hero", ".jpg", "hero.png") is None
    assert parse_variant_tags("hero", ".jpg", "hero.medium.png") is None
    assert parse_variant_tags("hero", ".jpg", "heroic.jpg") is None
    assert parse_variant_tags("hero", ".jpg", "superhero.2x.jpg") is None
    assert parse_variant_tags("hero", ".jpg", "kitten.jpg") is None


def test_empty_tags_are_not_variants():
    assert parse_variant_tags("hero", ".jpg", "hero..jpg") is None
    assert parse_variant_tags("hero", ".jpg", "hero.medium..jpg") is None


def test_tags_are_case_sensitive():
    assert parse_variant_tags("hero", ".jpg", "hero.Medium.jpg") == ["Medium"]
    assert parse_variant_tags("hero", ".jpg", "hero.medium.JPG") is None
