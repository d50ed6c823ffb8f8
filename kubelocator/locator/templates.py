"""Name template expansion for root selections."""

from __future__ import annotations


def expand_name_template(template: str, namespace: str) -> str:
    """Expand a root name template into a literal object name.

    Templates are taken literally for now; *namespace* is accepted so that
    variable substitution can be added here without touching the resolver.
    """
    return template
