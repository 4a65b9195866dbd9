# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Name inflection used to derive table names, aliases, accessor names and key names.
"""

from __future__ import annotations

import re
from functools import lru_cache

import inflect

_inflect_engine = inflect.engine()

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@lru_cache(maxsize=1024)
def pluralize(word: str) -> str:
    """Plural form of a word, keeping its case (User -> Users, category -> categories)."""
    if not word:
        return word
    return _inflect_engine.plural_noun(word) or word


@lru_cache(maxsize=1024)
def singularize(word: str) -> str:
    """Singular form of a word; words that are already singular come back unchanged."""
    if not word:
        return word
    # singular_noun returns False when the word is not a plural
    result = _inflect_engine.singular_noun(word)
    return result if result else word


def to_snake_case(name: str) -> str:
    """BlogPost -> blog_post, HTTPRequest -> http_request, already_snake -> already_snake."""
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def to_camel_case(name: str) -> str:
    """user_id -> userId, blog_post_id -> blogPostId."""
    head, *rest = to_snake_case(name).split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def join_key_name(prefix: str, key: str, underscored: bool) -> str:
    """Compose a foreign key column name from an association name and a key attribute."""
    snake = f"{to_snake_case(prefix)}_{to_snake_case(key)}"
    return snake if underscored else to_camel_case(snake)
