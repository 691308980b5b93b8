import unittest

from hamcrest import assert_that, is_, instance_of, contains_string

from cncchannel.schema.validators import Invalid, Valid, any_of, array_of, boolean, integer, literal, null, \
    nullable, number, record, string


class PrimitiveCheckTest(unittest.TestCase):

    def test_number(self):
        assert_that(bool(number(1)), is_(True))
        assert_that(bool(number(-15.6)), is_(True))
        assert_that(bool(number('1')), is_(False))
        assert_that(bool(number(True)), is_(False))
        assert_that(bool(number(None)), is_(False))
        assert_that(bool(number(float('nan'))), is_(False))
        assert_that(bool(number(10 ** 400)), is_(True))
        assert_that(bool(number(float('-inf'))), is_(False))

    def test_integer(self):
        assert_that(bool(integer(3)), is_(True))
        assert_that(bool(integer(3.5)), is_(False))
        assert_that(bool(integer(False)), is_(False))

    def test_boolean(self):
        assert_that(bool(boolean(False)), is_(True))
        assert_that(bool(boolean(0)), is_(False))
        assert_that(bool(boolean('true')), is_(False))

    def test_string_and_null(self):
        assert_that(bool(string('')), is_(True))
        assert_that(bool(string(1)), is_(False))
        assert_that(bool(null(None)), is_(True))
        assert_that(bool(null('')), is_(False))

    def test_valid_returns_value_unchanged(self):
        result = number(42.1)
        assert_that(result, is_(instance_of(Valid)))
        assert_that(result.value, is_(42.1))


class LiteralTest(unittest.TestCase):

    def test_membership(self):
        sut = literal('info', 'warning', 'error')
        assert_that(bool(sut('warning')), is_(True))
        assert_that(bool(sut('debug')), is_(False))

    def test_type_exact(self):
        assert_that(bool(literal(1)(True)), is_(False))
        assert_that(bool(literal(True)(1)), is_(False))


class CompositeCheckTest(unittest.TestCase):

    def test_array_of(self):
        sut = array_of(string)
        assert_that(bool(sut(['a', 'b'])), is_(True))
        assert_that(bool(sut([])), is_(True))
        assert_that(bool(sut(('a',))), is_(False))
        result = sut(['a', 2])
        assert_that(result.path, is_((1,)))

    def test_any_of_and_nullable(self):
        assert_that(bool(any_of(literal('Mock'), number)('Mock')), is_(True))
        assert_that(bool(any_of(literal('Mock'), number)('Real')), is_(False))
        assert_that(bool(nullable(string)(None)), is_(True))
        assert_that(bool(nullable(string)('demo.ngc')), is_(True))
        assert_that(bool(nullable(string)(3)), is_(False))


class RecordCheckTest(unittest.TestCase):

    def setUp(self):
        self.sut = record(required={'x': number, 'on': boolean}, optional={'name': string})

    def test_accepts_exact_and_ignores_unknown_fields(self):
        raw = {'x': 1, 'on': True, 'extra': [1, 2]}
        result = self.sut(raw)
        assert_that(bool(result), is_(True))
        assert_that(result.value is raw, is_(True))

    def test_missing_required_field(self):
        result = self.sut({'x': 1})
        assert_that(result, is_(instance_of(Invalid)))
        assert_that(result.reason, contains_string("'on'"))

    def test_optional_field_checked_when_present(self):
        assert_that(bool(self.sut({'x': 1, 'on': True, 'name': 'a'})), is_(True))
        assert_that(bool(self.sut({'x': 1, 'on': True, 'name': 5})), is_(False))

    def test_no_coercion(self):
        result = self.sut({'x': '1', 'on': True})
        assert_that(bool(result), is_(False))
        assert_that(result.where(), is_('x'))

    def test_non_objects_rejected(self):
        for raw in (None, [], 'x', 1):
            assert_that(bool(self.sut(raw)), is_(False))

    def test_nested_path(self):
        sut = record(required={'msg': record(required={'ok': boolean})})
        result = sut({'msg': {'ok': 'yes'}})
        assert_that(result.where(), is_('msg.ok'))
