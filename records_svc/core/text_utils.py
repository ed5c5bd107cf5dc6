"""
String helpers shared by services.
"""
import re

_WHITESPACE = re.compile(r"\s+")


def format_name(value: str) -> str:
    """
    Normalize a catalogue name (surgery, disease) to its canonical form.

    Trims, collapses inner whitespace and capitalizes only the first letter,
    so "  APENDICECTOMIA  total" and "apendicectomia total" map to the same
    "Apendicectomia total".
    """
    collapsed = _WHITESPACE.sub(" ", value.strip()).lower()
    return collapsed[:1].upper() + collapsed[1:]
