"""Tests for safe typed extraction."""

from cellsay_yolo.utils.map_converter import (
    convert_boxes_list,
    convert_to_typed_map,
    safe_get_bool,
    safe_get_double,
    safe_get_int,
    safe_get_map,
    safe_get_string,
)


def test_convert_to_typed_map_stringifies_keys():
    assert convert_to_typed_map({1: 'a', 'b': 2}) == {'1': 'a', 'b': 2}


def test_convert_boxes_list_skips_non_mappings():
    assert convert_boxes_list([{'x1': 1}, 'bad', None]) == [{'x1': 1}]


def test_safe_get_double():
    data = {'int': 3, 'float': 0.5, 'str': '0.25', 'bad': 'abc', 'bool': True, 'list': [1]}

    assert safe_get_double(data, 'int') == 3.0
    assert safe_get_double(data, 'float') == 0.5
    assert safe_get_double(data, 'str') == 0.25
    assert safe_get_double(data, 'bad') == 0.0
    assert safe_get_double(data, 'bool') == 0.0
    assert safe_get_double(data, 'list') == 0.0
    assert safe_get_double(data, 'missing', default=-1.0) == -1.0


def test_safe_get_string():
    data = {'s': 'person', 'n': 5, 'none': None}

    assert safe_get_string(data, 's') == 'person'
    assert safe_get_string(data, 'n') == '5'
    assert safe_get_string(data, 'none') == ''
    assert safe_get_string(data, 'missing', default='unknown') == 'unknown'


def test_safe_get_int():
    data = {'i': 4, 'f': 4.9, 's': '7', 'bad': '7.5', 'bool': False}

    assert safe_get_int(data, 'i') == 4
    assert safe_get_int(data, 'f') == 4
    assert safe_get_int(data, 's') == 7
    assert safe_get_int(data, 'bad') == 0
    assert safe_get_int(data, 'bool') == 0


def test_safe_get_bool_and_map():
    data = {'b': True, 'n': 1, 'm': {1: 'x'}, 'not_map': [1]}

    assert safe_get_bool(data, 'b') is True
    assert safe_get_bool(data, 'n') is False
    assert safe_get_map(data, 'm') == {'1': 'x'}
    assert safe_get_map(data, 'not_map') == {}
