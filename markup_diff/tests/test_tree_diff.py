from markup_diff.nodes import Document, Element, Text
from markup_diff.tree_diff import (compare_trees, Difference, DiffResult,
                                   DIFFERENCE_FIELDS)


def doc(*children):
    return Document(children)


def types_and_paths(differences):
    return [(item.type, item.path) for item in differences]


def test_identical_trees_have_no_differences():
    old = doc(Element('p', [('id', 'a')], [Text('Hello')]))
    new = doc(Element('p', [('id', 'a')], [Text('Hello')]))
    assert compare_trees(old, new) == []


def test_missing_roots():
    tree = doc(Element('p'))
    assert compare_trees(None, None) == []

    added, = compare_trees(None, tree)
    assert added.type == 'added'
    assert added.path == ''
    assert added.node is tree

    removed, = compare_trees(tree, None)
    assert removed.type == 'removed'
    assert removed.node is tree


def test_root_children_have_no_leading_slash():
    old = doc(Element('p'))
    new = doc(Element('p'), Element('div', children=[Text('x')]))
    assert types_and_paths(compare_trees(old, new)) == [('added', '1')]


def test_added_subtree_is_reported_once():
    subtree = Element('ul', children=[
        Element('li', children=[Text('one')]),
        Element('li', children=[Text('two')]),
    ])
    old = doc(Element('body', children=[Element('p', children=[Text('a')])]))
    new = doc(Element('body', children=[Element('p', children=[Text('a')]),
                                        subtree]))
    differences = compare_trees(old, new)
    assert len(differences) == 1
    assert differences[0].type == 'added'
    assert differences[0].path == '0/1'
    assert differences[0].node is subtree


def test_removed_subtree_is_reported_once():
    old = doc(Element('p'), Element('p', children=[Text('gone')]))
    new = doc(Element('p'))
    differences = compare_trees(old, new)
    assert types_and_paths(differences) == [('removed', '1')]
    assert differences[0].node.children[0].value == 'gone'


def test_changed_tag_keeps_comparing_children():
    old = doc(Element('td', [('class', 'a')], [Text('Hello')]))
    new = doc(Element('th', [('class', 'b')], [Text('Hullo')]))
    differences = compare_trees(old, new)
    assert types_and_paths(differences) == [
        ('changed', '0'),
        ('attributeChanged', '0'),
        ('text', '0/0'),
    ]
    assert differences[0].old_tag == 'td'
    assert differences[0].new_tag == 'th'


def test_element_replaced_by_text_is_a_changed_tag():
    old = doc(Element('b', children=[Text('bold')]))
    new = doc(Text('plain'))
    differences = compare_trees(old, new)
    assert types_and_paths(differences) == [('changed', '0'), ('removed', '0/0')]
    assert differences[0].new_tag == '#text'


def test_text_replaced_by_element_is_a_changed_tag():
    old = doc(Text('plain'))
    new = doc(Element('b', children=[Text('bold')]))
    differences = compare_trees(old, new)
    assert types_and_paths(differences) == [('changed', '0'), ('added', '0/0')]
    assert (differences[0].old_tag, differences[0].new_tag) == ('#text', 'b')


def test_text_replaced_by_empty_element_is_detected():
    old = doc(Element('p', children=[Text('hi')]))
    new = doc(Element('p', children=[Element('br')]))
    assert types_and_paths(compare_trees(old, new)) == [('changed', '0/0')]
    assert types_and_paths(compare_trees(new, old)) == [('changed', '0/0')]


def test_text_is_compared_without_surrounding_whitespace():
    old = doc(Element('p', children=[Text('  Hello\n')]))
    new = doc(Element('p', children=[Text('Hello')]))
    assert compare_trees(old, new) == []


def test_text_difference_segments():
    old = doc(Text(' cat '))
    new = doc(Text('cart'))
    difference, = compare_trees(old, new)
    assert difference.type == 'text'
    assert difference.kind == 'text'
    assert difference.path == '0'
    assert [tuple(segment) for segment in difference.changes] == [
        ('unchanged', 'ca'), ('inserted', 'r'), ('unchanged', 't')]


def test_attribute_differences_are_ordered_old_keys_first():
    old = Element('a', [('href', '/old'), ('id', 'x'), ('title', 'same')])
    new = Element('a', [('rel', 'nofollow'), ('title', 'same'),
                        ('href', '/new')])
    differences = compare_trees(old, new)
    assert [(item.type, item.name) for item in differences] == [
        ('attributeChanged', 'href'),
        ('attributeRemoved', 'id'),
        ('attributeAdded', 'rel'),
    ]
    assert differences[0].old_value == '/old'
    assert differences[0].new_value == '/new'
    assert differences[1].old_value == 'x'
    assert differences[2].value == 'nofollow'


def test_differences_are_in_depth_first_order():
    old = doc(Element('div', [('id', 'a')], [
        Element('p', children=[Text('one')]),
        Element('p', children=[Text('two')]),
    ]))
    new = doc(Element('section', [('id', 'b')], [
        Element('p', children=[Text('uno')]),
        Element('p', children=[Text('two')]),
        Element('p', children=[Text('three')]),
    ]))
    assert types_and_paths(compare_trees(old, new)) == [
        ('changed', '0'),
        ('attributeChanged', '0'),
        ('text', '0/0/0'),
        ('added', '0/2'),
    ]


def test_inserted_sibling_shifts_positions():
    old = doc(Element('p', children=[Text('a')]),
              Element('p', children=[Text('b')]))
    new = doc(Element('h1', children=[Text('new')]),
              Element('p', children=[Text('a')]),
              Element('p', children=[Text('b')]))
    assert types_and_paths(compare_trees(old, new)) == [
        ('changed', '0'),
        ('text', '0/0'),
        ('text', '1/0'),
        ('added', '2'),
    ]


def test_aligned_children_avoid_shifting():
    old = doc(Element('p', children=[Text('a')]),
              Element('p', children=[Text('b')]))
    new = doc(Element('h1', children=[Text('new')]),
              Element('p', children=[Text('a')]),
              Element('p', children=[Text('b')]))
    differences = compare_trees(old, new, align_children=True)
    assert types_and_paths(differences) == [('added', '0')]
    assert differences[0].node.tag == 'h1'


def test_aligned_children_report_removals_at_old_positions():
    old = doc(Element('p', children=[Text('a')]),
              Element('img'),
              Element('p', children=[Text('b')]))
    new = doc(Element('p', children=[Text('a')]),
              Element('p', children=[Text('b!')]))
    differences = compare_trees(old, new, align_children=True)
    assert types_and_paths(differences) == [('removed', '1'), ('text', '1/0')]


def test_aligned_children_pair_replacements():
    old = doc(Element('b', children=[Text('x')]))
    new = doc(Element('i', children=[Text('x')]))
    assert (types_and_paths(compare_trees(old, new, align_children=True)) ==
            [('changed', '0')])


def test_custom_text_differ():
    def differ(a, b):
        return [('whole', f'{a}->{b}')]

    difference, = compare_trees(doc(Text('a')), doc(Text('b')),
                                text_differ=differ)
    assert difference.changes == [('whole', 'a->b')]


def test_difference_to_dict():
    difference = Difference('attributeChanged', '0/1', name='class',
                            old_value='old', new_value='new')
    assert difference.to_dict() == {
        'type': 'attributeChanged',
        'kind': 'structural',
        'path': '0/1',
        'name': 'class',
        'old_value': 'old',
        'new_value': 'new',
    }

    added = Difference('added', '2', node=Element('br'))
    assert added.to_dict()['node'] == {
        'kind': 'element', 'tag': 'br', 'attributes': [], 'children': []}


def test_difference_fields_cover_every_type():
    assert set(DIFFERENCE_FIELDS) == {
        'added', 'removed', 'changed', 'attributeAdded', 'attributeRemoved',
        'attributeChanged', 'text'}


def test_diff_result_views():
    structural = Difference('changed', '0', old_tag='td', new_tag='th')
    text = Difference('text', '0/0', changes=[])
    result = DiffResult.from_differences([structural, text])
    assert result.changed
    assert result.change_count == 2
    assert result.structural_differences == [structural]
    assert result.text_differences == [text]

    flat = result.to_dict(flat=True)
    assert flat['changed'] is True
    assert [item['type'] for item in flat['structural_differences']] == ['changed']
    assert [item['type'] for item in flat['text_differences']] == ['text']
    assert 'differences' not in flat

    unified = result.to_dict()
    assert [item['type'] for item in unified['differences']] == ['changed', 'text']


def test_empty_diff_result_is_unchanged():
    result = DiffResult.from_differences([])
    assert not result.changed
    assert result.to_dict() == {'changed': False, 'change_count': 0,
                                'differences': []}


def node_at(root, path):
    node = root
    for index in path.split('/') if path else ():
        children = node.children
        if int(index) >= len(children):
            return None
        node = children[int(index)]
    return node


def test_aligned_removals_under_a_moved_parent_use_old_paths():
    removed_child = Element('b')
    old = doc(Element('p', children=[Element('a'), removed_child]))
    new = doc(Element('h1'),
              Element('p', children=[Element('a')]))
    differences = compare_trees(old, new, align_children=True)
    assert types_and_paths(differences) == [('added', '0'), ('removed', '0/1')]
    assert node_at(new, differences[0].path) is differences[0].node
    assert node_at(old, differences[1].path) is removed_child


def test_aligned_changes_under_a_moved_parent_use_new_paths():
    old = doc(Element('ul', children=[Element('li', children=[Text('one')])]))
    new = doc(Element('h2'),
              Element('ul', children=[Element('li', children=[Text('uno')])]))
    differences = compare_trees(old, new, align_children=True)
    assert types_and_paths(differences) == [('added', '0'), ('text', '1/0/0')]
    assert node_at(new, '1/0/0').value == 'uno'
