"""
Association name inflection

Maps a nested attributes key to the name of the lookup that returns the ids
of the records currently associated with the owner, eg.

    "tags_attributes"     => "tag_ids"
    "children_attributes" => "child_ids"
    "blog_posts_attributes" => "blog_post_ids"
"""
from functools import lru_cache
import inflect
from .config import get_config

_engine = inflect.engine()

# latin plurals inflect strips to "matrice", "indice", ..
IRREGULAR_SINGULARS = {
    "matrices": "matrix",
    "indices": "index",
    "vertices": "vertex",
    "axes": "axis",
}


@lru_cache(maxsize=256)
def singularize(word: str) -> str:
    """
    :param word: (plural) snake_case word
    :return: singular form, only the last word of a snake_case name is inflected

    inflect returns False for words that are already singular, these are returned as-is
    """
    head, sep, last = word.rpartition("_")
    if not last:
        return word
    singular = IRREGULAR_SINGULARS.get(last.lower()) or _engine.singular_noun(last)
    if not singular:
        return word
    return f"{head}{sep}{singular}"


def is_nested_attributes_key(key_name) -> bool:
    """
    :param key_name: key in an attributes dict (may be None at the root)
    :return: True if the key holds the nested attributes of an association
    """
    suffix = get_config("NESTED_ATTRIBUTES_SUFFIX")
    return str(key_name or "").endswith(suffix) and len(str(key_name)) > len(suffix)


def association_name(key_name: str) -> str:
    """
    :param key_name: nested attributes key, eg. "tags_attributes"
    :return: association name, eg. "tags"
    """
    suffix = get_config("NESTED_ATTRIBUTES_SUFFIX")
    key_name = str(key_name)
    if key_name.endswith(suffix):
        return key_name[: -len(suffix)]
    return key_name


def derive_ids_lookup_name(key_name: str) -> str:
    """
    :param key_name: nested attributes key, eg. "tags_attributes"
    :return: name of the ids lookup on the owning model, eg. "tag_ids"
    """
    return singularize(association_name(key_name)) + get_config("IDS_LOOKUP_SUFFIX")
