"""
Slug generation for blog post titles.
"""
import re
from typing import Any, Optional

from slugify import slugify

# Punctuation removed before slugifying
STRIP_CHARACTERS = "*+~.()'\"!:@#%^&${}<>?/|"
_STRIP_PATTERN = re.compile("[" + re.escape(STRIP_CHARACTERS) + "]")


def make_slug(title: Optional[Any]) -> str:
    """
    Derive a lowercase, hyphen-separated slug from a title.

    "Hello, World!" -> "hello-world". Non-string titles are converted with
    str() first. Slugs are not unique across posts.
    """
    if title is None:
        return ""
    return slugify(_STRIP_PATTERN.sub("", str(title)), lowercase=True, separator="-")
