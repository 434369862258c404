"""Class-hierarchy expansion functions.

Ordinary ``children_of`` callbacks for walking Python classes. Both accept
any value and return no children for non-classes.
"""

from typing import Any, List


def nested_classes(cls: Any) -> List[type]:
    """Return the classes declared directly in ``cls``'s body.

    Aliases to classes defined elsewhere are not included. Definition
    order is preserved.

    Example:
        >>> walk(collections.OrderedDict, nested_classes)
    """
    if not isinstance(cls, type):
        return []
    prefix = f"{cls.__qualname__}."
    return [
        member for member in vars(cls).values()
        if isinstance(member, type)
        and member.__qualname__ == prefix + member.__name__
        and member.__module__ == cls.__module__
    ]


def subclasses(cls: Any) -> List[type]:
    """Return the direct subclasses of ``cls``.

    Works for ``type`` itself, whose bound ``__subclasses__`` is not
    callable without an argument.
    """
    if not isinstance(cls, type):
        return []
    return type.__subclasses__(cls)
