"""
Structural comparison of two document trees.

The comparison walks both trees at the same time, position by position. Nodes
correspond when they sit at the same *path*: the sequence of child indexes
leading to them from the root, written like `0/2/1`. This is positional, not
identity-based, so inserting a sibling shifts the path of every sibling after
it, and each of those is then reported as changed. Passing
`align_children=True` to `compare_trees` aligns sibling lists with
`difflib.SequenceMatcher` first, which avoids most of that cascade.

Every difference found is reported as a `Difference`, in depth-first order: a
node's own differences (tag, then text, then attributes) come before those of
its children, and children are visited in index order.
"""

from difflib import SequenceMatcher
import logging
from .nodes import ELEMENT, TEXT, child_path

logger = logging.getLogger(__name__)

STRUCTURAL = 'structural'
TEXTUAL = 'text'

# Fields carried by each type of difference (besides `type` and `path`).
DIFFERENCE_FIELDS = {
    'added': ('node',),
    'removed': ('node',),
    'changed': ('old_tag', 'new_tag'),
    'attributeAdded': ('name', 'value'),
    'attributeRemoved': ('name', 'old_value'),
    'attributeChanged': ('name', 'old_value', 'new_value'),
    'text': ('changes',),
}

ATTRIBUTE_TYPES = ('attributeAdded', 'attributeRemoved', 'attributeChanged')


class Difference:
    """
    A single change between two documents.

    Attributes
    ----------
    type : string
        One of `added`, `removed`, `changed`, `attributeAdded`,
        `attributeRemoved`, `attributeChanged` or `text`.
    kind : string
        `text` for text differences and `structural` for everything else.
    path : string or None
        Where the change is. `None` only for the single difference produced
        when comparing plain text.
    node : Node
        For `added` and `removed`, the entire subtree that exists on one side.
    old_tag, new_tag : string
        For `changed`.
    name, value, old_value, new_value : string
        For attribute differences.
    changes : list of Segment
        For `text`.
    """

    def __init__(self, type, path, node=None, old_tag=None, new_tag=None,
                 name=None, value=None, old_value=None, new_value=None,
                 changes=None):
        if type not in DIFFERENCE_FIELDS:
            raise ValueError(f'Unknown difference type: "{type}"')
        self.type = type
        self.kind = TEXTUAL if type == 'text' else STRUCTURAL
        self.path = path
        self.node = node
        self.old_tag = old_tag
        self.new_tag = new_tag
        self.name = name
        self.value = value
        self.old_value = old_value
        self.new_value = new_value
        self.changes = changes

    @property
    def is_structural(self):
        return self.kind == STRUCTURAL

    def to_dict(self):
        result = {'type': self.type, 'kind': self.kind}
        if self.path is not None:
            result['path'] = self.path
        for field in DIFFERENCE_FIELDS[self.type]:
            value = getattr(self, field)
            if field == 'node':
                value = value.to_dict()
            elif field == 'changes':
                value = [segment._asdict() for segment in value]
            result[field] = value
        return result

    def __eq__(self, other):
        return isinstance(other, Difference) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'<Difference {self.type} at {self.path!r}>'


class DiffResult:
    """
    The result of comparing two documents.

    `changed` is true when anything changed. `differences` is the ordered list
    of `Difference` objects describing what changed.
    """

    def __init__(self, changed, differences):
        self.changed = changed
        self.differences = list(differences)

    @classmethod
    def unchanged(cls):
        return cls(False, [])

    @classmethod
    def from_differences(cls, differences):
        differences = list(differences)
        return cls(len(differences) > 0, differences)

    @property
    def change_count(self):
        return len(self.differences)

    @property
    def structural_differences(self):
        return [item for item in self.differences if item.is_structural]

    @property
    def text_differences(self):
        return [item for item in self.differences if not item.is_structural]

    def to_dict(self, flat=False):
        """
        Convert the result to plain, JSON-serializable data.

        Parameters
        ----------
        flat : boolean, optional
            If true, split differences into `structural_differences` and
            `text_differences` lists instead of one `differences` list.
        """
        result = {'changed': self.changed, 'change_count': self.change_count}
        if flat:
            result['structural_differences'] = [
                item.to_dict() for item in self.structural_differences]
            result['text_differences'] = [
                item.to_dict() for item in self.text_differences]
        else:
            result['differences'] = [item.to_dict()
                                     for item in self.differences]
        return result

    def __repr__(self):
        return (f'<DiffResult changed={self.changed} '
                f'differences={self.change_count}>')


def compare_trees(old_root, new_root, align_children=False,
                  text_differ=None):
    """
    List the differences between two document trees.

    Either root may be `None`, in which case the whole other tree is reported
    as added or removed.

    Parameters
    ----------
    old_root : Node or None
    new_root : Node or None
    align_children : boolean, optional
        Align sibling lists before comparing them instead of pairing siblings
        strictly by index. Paths of matched and added nodes then refer to the
        new tree and paths of removed nodes refer to the old tree.
    text_differ : callable, optional
        Function that takes two strings and returns a list of `Segment`.
        Defaults to `markup_diff.differs.text_segments`.

    Returns
    -------
    differences : list of Difference
    """
    if text_differ is None:
        from .differs import text_segments
        text_differ = text_segments

    differences = []
    _compare_nodes(old_root, new_root, '', '', differences, align_children,
                   text_differ)
    logger.debug(f'Found {len(differences)} differences between trees')
    return differences


def _compare_nodes(old, new, old_path, new_path, differences, align_children,
                   text_differ):
    # Removals are addressed in the old tree; everything else in the new one.
    # Without alignment the two paths are always the same.
    if old is None and new is None:
        return
    elif old is None:
        differences.append(Difference('added', new_path, node=new))
        return
    elif new is None:
        differences.append(Difference('removed', old_path, node=old))
        return

    path = new_path
    if old.identity != new.identity:
        differences.append(Difference('changed', path,
                                      old_tag=old.identity,
                                      new_tag=new.identity))

    if old.kind == TEXT and new.kind == TEXT:
        old_text = old.value.strip()
        new_text = new.value.strip()
        if old_text != new_text:
            differences.append(Difference(
                'text', path, changes=text_differ(old_text, new_text)))

    if old.kind == ELEMENT and new.kind == ELEMENT:
        differences.extend(compare_attributes(old, new, path))

    for old_index, new_index, old_child, new_child in _pair_children(
            old.children, new.children, align_children):
        _compare_nodes(old_child, new_child,
                       child_path(old_path, old_index),
                       child_path(new_path, new_index),
                       differences, align_children, text_differ)


def compare_attributes(old, new, path):
    """
    Yield a `Difference` for each attribute that differs between two elements.
    Attributes of the old element are checked first, in order, followed by any
    attributes that only the new element has.
    """
    old_attributes = old.attribute_map
    new_attributes = new.attribute_map

    for name, old_value in old_attributes.items():
        if name not in new_attributes:
            yield Difference('attributeRemoved', path, name=name,
                             old_value=old_value)
        elif new_attributes[name] != old_value:
            yield Difference('attributeChanged', path, name=name,
                             old_value=old_value,
                             new_value=new_attributes[name])

    for name, value in new_attributes.items():
        if name not in old_attributes:
            yield Difference('attributeAdded', path, name=name, value=value)


def _pair_children(old_children, new_children, align_children):
    """
    Yield `(old_index, new_index, old_child, new_child)` for each pair of
    children to compare. One of the children is `None` where a node exists on
    only one side.
    """
    if not align_children:
        for index in range(max(len(old_children), len(new_children))):
            yield (index, index,
                   old_children[index] if index < len(old_children) else None,
                   new_children[index] if index < len(new_children) else None)
        return

    matcher = SequenceMatcher(a=[child.signature for child in old_children],
                              b=[child.signature for child in new_children],
                              autojunk=False)
    # Within each opcode, pair up nodes by offset. For `replace` blocks of
    # unequal length this leaves a run of additions or removals at the end.
    for _, a_start, a_end, b_start, b_end in matcher.get_opcodes():
        for offset in range(max(a_end - a_start, b_end - b_start)):
            old_index = a_start + offset
            new_index = b_start + offset
            yield (old_index, new_index,
                   old_children[old_index] if old_index < a_end else None,
                   new_children[new_index] if new_index < b_end else None)
