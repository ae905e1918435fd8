"""Tools for parsing XML data into Python models."""

import typing as t

import xml.etree.ElementTree as etree

from nsclient.exceptions import XMLError

T = t.TypeVar("T")


def as_xml(data: t.Union[str, bytes]) -> etree.Element:
    """Parse the given data as XML and return the root node."""
    try:
        return etree.fromstring(data)
    except etree.ParseError as error:
        raise XMLError(
            f"Tried to parse malformed data as XML. Error: {error}, Got data: '{data!r}'"
        ) from error


def expect_root(node: etree.Element, tag: str) -> etree.Element:
    """Returns the node, raising XMLError if its tag is not the expected one."""
    if node.tag != tag:
        raise XMLError(f"Expected a {tag} node, got {node.tag}")
    return node


class NodeParse:
    """Class to ease the transformation from XML data to a Python object."""

    def __init__(self, node: etree.Element) -> None:
        """Wraps a root node, indexing its children by tag."""
        self.node = node

        child_tags: t.MutableMapping[str, t.MutableSequence[etree.Element]] = {}
        for child in node:
            child_tags.setdefault(child.tag, []).append(child)

        # 'Freeze' the child tags attribute so that it appears immutable
        self.child_tags: t.Mapping[str, t.Sequence[etree.Element]] = child_tags

    def has_name(self, name: str) -> bool:
        """Checks whether the given name is a tag of one of the child nodes."""
        return name in self.child_tags

    def from_name(self, name: str) -> t.Sequence[etree.Element]:
        """Returns all child nodes with the given tag.
        Raises KeyError if the tag doesnt exist.
        """
        return self.child_tags[name]

    def first(self, name: str) -> etree.Element:
        """Returns the first child node with the given tag."""
        return self.from_name(name)[0]

    def simple(self, name: str) -> str:
        """Returns the text content of the first subnode with a matching tag"""
        return content(self.first(name))

    # The optional accessors return None when the shard was not requested

    def optional(self, name: str) -> t.Optional[str]:
        """Text of the first matching child, or None if there is none."""
        return self.simple(name) if self.has_name(name) else None

    def optional_node(self, name: str) -> t.Optional[etree.Element]:
        """First matching child, or None if there is none."""
        return self.first(name) if self.has_name(name) else None

    def convert(self, name: str, converter: t.Callable[[str], T]) -> t.Optional[T]:
        """Converted text of the first matching child.

        None if the child is missing or empty.
        Raises XMLError if the converter rejects the text.
        """
        text = self.optional(name)
        if not text:
            return None
        try:
            return converter(text)
        except ValueError as error:
            raise XMLError(f"Could not convert {name} value '{text}'") from error

    def optional_int(self, name: str) -> t.Optional[int]:
        """Integer content of the first matching child, if any."""
        return self.convert(name, int)

    def optional_float(self, name: str) -> t.Optional[float]:
        """Float content of the first matching child, if any."""
        return self.convert(name, float)

    def optional_list(self, name: str, separator: str) -> t.Optional[t.Sequence[str]]:
        """Content of the first matching child split by separator, if any.

        An empty node gives an empty list.
        """
        text = self.optional(name)
        if text is None:
            return None
        return split(text, separator)

    def optional_sequence(
        self, name: str, key: t.Callable[[etree.Element], T]
    ) -> t.Optional[t.Sequence[T]]:
        """The key applied to each child of the first matching child, if any."""
        node = self.optional_node(name)
        return None if node is None else sequence(node, key)


def content(node: etree.Element) -> str:
    """Function to parse simple tags that contain the data as text"""
    return node.text if node.text else ""


def split(text: str, separator: str) -> t.Sequence[str]:
    """Splits text by separator; the empty string gives an empty list."""
    return text.split(separator) if text else []


def sequence(node: etree.Element, key: t.Callable[[etree.Element], T]) -> t.Sequence[T]:
    """Traverses the subnodes of a given node,
    retrieving the result from the key function for each child.
    """
    return [key(sub) for sub in node]
