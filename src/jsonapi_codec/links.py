PLACEHOLDER = "{id}"
"""
The token substituted with the identity of the record being serialized.
"""


def resolve_related_link(template: str, id: str) -> str:
    """
    Resolves a related-link template against the identity of the host record.

    Every occurrence of :py:data:`PLACEHOLDER` is replaced; a template without one is
    returned verbatim as a static link.

    :param str template: a URL template such as ``/posts/{id}/comments``.
    :param str id: the identity of the record that owns the relationship.
    :return: the resolved URL.
    """
    return template.replace(PLACEHOLDER, id)
