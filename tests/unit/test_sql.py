from __future__ import annotations

import pytest

from table_translator.errors import SchemaError
from table_translator.sql import (
    NUL_PATTERN,
    build_alter_varchar,
    build_select_translatable,
    build_update,
    quote_identifier,
)


def test_quote_identifier_wraps_in_backticks() -> None:
    assert quote_identifier("title_en") == "`title_en`"


@pytest.mark.parametrize("name", ["", "a`b", "bad\x00name", " padded", "x" * 65])
def test_quote_identifier_rejects_unsafe_names(name: str) -> None:
    with pytest.raises(SchemaError):
        quote_identifier(name)


def test_select_or_combines_field_conditions() -> None:
    sql, params = build_select_translatable("articles", "id", ["title", "body"])

    assert sql.startswith("SELECT `id`, `title`, `body` FROM `articles` WHERE ")
    assert (
        "(`title` IS NOT NULL AND `title` != %s AND `title` NOT LIKE %s) OR "
        "(`body` IS NOT NULL AND `body` != %s AND `body` NOT LIKE %s)"
    ) in sql
    assert params == ["", NUL_PATTERN, "", NUL_PATTERN]
    assert "\x00" in NUL_PATTERN


def test_select_requires_columns() -> None:
    with pytest.raises(ValueError):
        build_select_translatable("articles", "id", [])


def test_update_binds_values_and_key() -> None:
    sql = build_update("articles", "id", ["title_en", "body_en"])
    assert sql == "UPDATE `articles` SET `title_en` = %s, `body_en` = %s WHERE `id` = %s"


def test_alter_sets_charset_and_collation() -> None:
    sql = build_alter_varchar("articles", "title_en", 191, "utf8mb4", "utf8mb4_unicode_ci")
    assert sql == (
        "ALTER TABLE `articles` MODIFY COLUMN `title_en` VARCHAR(191) "
        "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
    )


def test_alter_keeps_not_null() -> None:
    sql = build_alter_varchar("t", "c", 255, "utf8mb4", "utf8mb4_bin", nullable=False)
    assert sql.endswith("COLLATE utf8mb4_bin NOT NULL")


def test_alter_rejects_non_positive_length() -> None:
    with pytest.raises(ValueError):
        build_alter_varchar("t", "c", 0, "utf8mb4", "utf8mb4_bin")
