"""Utility functions for vellum."""

import re
import unicodedata


def slugify(text: str, max_len: int = 200) -> str:
    """
    Convert an article title to a URL-safe slug.
    
    - Lowercase
    - Unicode normalize (NFKD), drop combining marks
    - Remove punctuation except spaces and hyphens
    - Convert whitespace to single `-`
    - Collapse multiple `-` to single, strip leading/trailing `-`
    - Cut to `max_len` characters
    
    Examples:
        >>> slugify("Spring market days")
        'spring-market-days'
        >>> slugify("Jajca – nova cena")
        'jajca-nova-cena'
    """
    text = text.lower()
    
    # En dash, em dash and minus sign become a regular hyphen
    text = text.replace('–', '-').replace('—', '-').replace('−', '-')
    
    text = unicodedata.normalize('NFKD', text)
    text = ''.join(c for c in text if not unicodedata.combining(c))
    
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'\s+', '-', text)
    text = re.sub(r'-+', '-', text)
    text = text.strip('-')
    
    return text[:max_len].rstrip('-')


def parse_style(value: str | None) -> dict[str, str]:
    """Parse a flat ``key:value;...`` style list into a map.

    Entries without a colon or with an empty key are skipped.
    """
    out: dict[str, str] = {}
    if not value:
        return out
    for decl in value.split(";"):
        prop, sep, val = decl.partition(":")
        prop = prop.strip().lower()
        if not sep or not prop:
            continue
        out[prop] = val.strip()
    return out


def format_style(style: dict[str, str]) -> str:
    return "; ".join(f"{k}: {v}" for k, v in style.items())


_SAFE_SCHEMES = ("http", "https", "mailto", "tel")


def is_safe_url(url: str) -> bool:
    """True for http(s)/mailto/tel links and scheme-less (relative) links."""
    candidate = url.strip()
    scheme, sep, _ = candidate.partition(":")
    if not sep or "/" in scheme or "?" in scheme or "#" in scheme:
        return True
    return scheme.lower() in _SAFE_SCHEMES
