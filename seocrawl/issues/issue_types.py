"""Identifiers of the issues that the reporters can find in crawled pages.

Each value matches the id of the corresponding issue type in the database.
"""

from enum import IntEnum


class ErrorType(IntEnum):
    """Kinds of issues reported for crawled pages."""

    HTTP_30X = 1  # HTTP redirect
    HTTP_40X = 2  # HTTP not found
    HTTP_50X = 3  # HTTP internal error
    DUPLICATED_TITLE = 4
    DUPLICATED_DESCRIPTION = 5
    EMPTY_TITLE = 6
    SHORT_TITLE = 7
    LONG_TITLE = 8
    EMPTY_DESCRIPTION = 9
    SHORT_DESCRIPTION = 10
    LONG_DESCRIPTION = 11
    LITTLE_CONTENT = 12
    IMAGES_WITH_NO_ALT = 13
    REDIRECT_CHAIN = 14
    NO_H1 = 15
    NO_LANG = 16
    HTTP_LINKS = 17
    HREFLANGS_RETURN_LINK = 18
    TOO_MANY_LINKS = 19
    INTERNAL_NO_FOLLOW = 20
    EXTERNAL_WITHOUT_NO_FOLLOW = 21
    CANONICALIZED_TO_NON_CANONICAL = 22
    REDIRECT_LOOP = 23
    NOT_VALID_HEADINGS = 24
    HREFLANG_TO_NON_CANONICAL = 25
    INTERNAL_NO_FOLLOW_INDEXABLE = 26
    NO_INDEXABLE = 27
    HREFLANG_NOINDEXABLE = 28
    BLOCKED = 29
    ORPHAN = 30
    SITEMAP_NO_INDEX = 31
    SITEMAP_BLOCKED = 32
    SITEMAP_NON_CANONICAL = 33
    INCOMING_FOLLOW_NOFOLLOW = 34
    INVALID_LANGUAGE = 35
    HTTP_SCHEME = 36
    DEADEND = 37
    CANONICALIZED_TO_NON_INDEXABLE = 38
    HREFLANG_TO_REDIRECT = 39
    CANONICALIZED_TO_REDIRECT = 40
    HREFLANG_TO_ERROR = 41
    CANONICALIZED_TO_ERROR = 42
    MULTIPLE_CANONICAL_TAGS = 43
    RELATIVE_CANONICAL_URL = 44
    HREFLANG_MISSING_X_DEFAULT = 45
    HREFLANG_MISSING_SELF_REFERENCE = 46
    HREFLANG_MISMATCH_LANG = 47
    HREFLANG_RELATIVE_URL = 48
    CANONICAL_MISMATCH = 49
    MISSING_HSTS_HEADER = 50
    MISSING_CSP = 51
    CONTENT_TYPE_OPTIONS = 52
    LARGE_IMAGE = 53
    LONG_ALT_TEXT = 54
    MULTIPLE_TITLE_TAGS = 55
    MULTIPLE_DESCRIPTION_TAGS = 56
    DEPTH = 57
    MULTIPLE_LANG_REFERENCE = 58
    DUPLICATED_CONTENT = 59
    EXTERNAL_LINK_REDIRECT = 60
    EXTERNAL_LINK_BROKEN = 61
    TIMEOUT = 62
    UNDERSCORE_URL = 63
    SLOW_TTFB = 64
    FORM_ON_HTTP = 65
    INSECURE_FORM = 66
    SPACE_URL = 67
    MULTIPLE_SLASHES = 68
    NO_IMAGE_INDEX = 69
    MISSING_IMG_ELEMENT = 70
    METAS_IN_BODY = 71
    NOSNIPPET = 72
    IMG_WITHOUT_SIZE = 73
    INCORRECT_MEDIA_TYPE = 74