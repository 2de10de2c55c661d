import datetime

import pytest
from covenantsql.exceptions import ClosedResourceError, DataError, InvalidColumnError
from covenantsql.exceptions import ProtocolError, ValidationError
from covenantsql.result import ResultSet


def _count_rows(rs):
    count = 0
    while rs.next():
        count += 1
    return count


def test_advances_over_all_rows(five_rows):
    rs = ResultSet(five_rows)
    assert _count_rows(rs) == 5
    assert rs.next() is False


def test_zero_cap_is_unlimited(five_rows):
    rs = ResultSet(five_rows, max_rows=0)
    assert _count_rows(rs) == 5


def test_cap_truncates_visible_rows(five_rows):
    rs = ResultSet(five_rows, max_rows=2)
    assert rs.next() is True
    assert rs.get('id') == 1
    assert rs.next() is True
    assert rs.get('id') == 2
    assert rs.next() is False
    assert rs.fetched_rows == 5


def test_cap_larger_than_rows(five_rows):
    assert _count_rows(ResultSet(five_rows, max_rows=50)) == 5


def test_negative_cap_rejected(five_rows):
    with pytest.raises(ValidationError):
        ResultSet(five_rows, max_rows=-1)
    rs = ResultSet(five_rows)
    with pytest.raises(ValidationError):
        rs.set_max_rows(-3)
    assert rs.get_max_rows() == 0


def test_get_by_name_and_index(five_rows):
    rs = ResultSet(five_rows)
    rs.next()
    assert rs.get('email') == 'user1@example.com'
    assert rs.get(0) == 1
    assert rs.get(1) == 'user1@example.com'
    assert rs.find_column('email') == 1
    assert rs.columns == ['id', 'email']


def test_get_row(five_rows):
    rs = ResultSet(five_rows)
    rs.next()
    row = rs.get_row()
    assert row == {'id': 1, 'email': 'user1@example.com'}
    row['id'] = 99
    assert rs.get('id') == 1


def test_unknown_column(five_rows):
    rs = ResultSet(five_rows)
    rs.next()
    with pytest.raises(InvalidColumnError):
        rs.get('missing')
    with pytest.raises(InvalidColumnError):
        rs.get(2)
    with pytest.raises(InvalidColumnError):
        rs.get(-1)
    with pytest.raises(InvalidColumnError):
        rs.find_column('missing')


def test_get_requires_position(five_rows):
    rs = ResultSet(five_rows, max_rows=1)
    with pytest.raises(ProtocolError):
        rs.get('id')
    rs.next()
    rs.next()
    with pytest.raises(ProtocolError):
        rs.get('id')


def test_row_number(five_rows):
    rs = ResultSet(five_rows)
    assert rs.row_number == 0
    rs.next()
    rs.next()
    assert rs.row_number == 2
    _count_rows(rs)
    assert rs.row_number == 0


def test_values_are_not_coerced():
    rs = ResultSet([{'n': 1, 'f': 1.5, 's': '7', 'z': None}])
    rs.next()
    assert rs.get('n') == 1 and isinstance(rs.get('n'), int)
    assert rs.get('f') == 1.5
    assert rs.get('s') == '7'
    assert rs.get('z') is None


def test_typed_getters():
    rs = ResultSet([{
        'id': '42',
        'ratio': '0.25',
        'active': 'true',
        'email': 17,
        'created_at': '2018-06-01 12:30:00',
        'deleted_at': None,
    }])
    rs.next()
    assert rs.get_int('id') == 42
    assert rs.get_float('ratio') == 0.25
    assert rs.get_bool('active') is True
    assert rs.get_string('email') == '17'
    assert rs.get_datetime('created_at') == datetime.datetime(2018, 6, 1, 12, 30)
    assert rs.get_datetime('deleted_at') is None
    assert rs.get_int('deleted_at') is None


def test_typed_getter_conversion_failure():
    rs = ResultSet([{'email': 'a@b.c'}])
    rs.next()
    with pytest.raises(DataError):
        rs.get_int('email')
    with pytest.raises(DataError):
        rs.get_datetime('email')


def test_closed_accessors_fail(five_rows):
    rs = ResultSet(five_rows)
    rs.next()
    rs.close()
    assert rs.closed is True
    with pytest.raises(ClosedResourceError):
        rs.next()
    with pytest.raises(ClosedResourceError):
        rs.get('id')
    with pytest.raises(ClosedResourceError):
        rs.get(0)
    with pytest.raises(ClosedResourceError):
        rs.get_row()
    with pytest.raises(ClosedResourceError):
        rs.columns


def test_close_before_first_and_after_exhaustion(five_rows):
    for advances in (0, 10):
        rs = ResultSet(five_rows)
        for _ in range(advances):
            rs.next()
        rs.close()
        with pytest.raises(ClosedResourceError):
            rs.advance()
        with pytest.raises(ClosedResourceError):
            rs.get('email')


def test_close_is_idempotent(five_rows):
    rs = ResultSet(five_rows)
    rs.close()
    rs.close()
    assert rs.closed is True


def test_cap_does_not_mutate_snapshot(five_rows):
    rs = ResultSet(five_rows, max_rows=2)
    assert rs.fetched_rows == 5
    assert len(five_rows) == 5


def test_empty_result_set():
    rs = ResultSet.empty()
    assert rs.closed is False
    assert rs.columns == []
    assert rs.next() is False


def test_context_manager(five_rows):
    with ResultSet(five_rows) as rs:
        rs.next()
    assert rs.closed is True


def test_unwrap(five_rows):
    rs = ResultSet(five_rows)
    assert rs.is_wrapper_for(ResultSet)
    assert rs.unwrap(ResultSet) is rs
    with pytest.raises(ProtocolError):
        rs.unwrap(int)


def test_sequence_rows_with_repeated_columns():
    rs = ResultSet([(1, 2, 'a@b.c')], columns=['id', 'id', 'email'])
    rs.next()
    assert rs.get(0) == 1
    assert rs.get(1) == 2
    assert rs.get('id') == 1
    assert rs.get_values() == (1, 2, 'a@b.c')
    assert rs.get_row() == {'id': 1, 'email': 'a@b.c'}


def test_get_values_requires_position(five_rows):
    rs = ResultSet(five_rows)
    with pytest.raises(ProtocolError):
        rs.get_values()
    rs.next()
    assert rs.get_values() == (1, 'user1@example.com')


@pytest.mark.parametrize('value', [None, True, 2.0, '1'])
def test_cap_must_be_int(five_rows, value):
    with pytest.raises(ValidationError):
        ResultSet(five_rows, max_rows=value)


def test_conversion_failure_is_a_dbapi_data_error():
    from covenantsql import dbapi
    rs = ResultSet([{'id': 'seven'}])
    rs.next()
    with pytest.raises(dbapi.DataError) as exc_info:
        rs.get_float('id')
    assert not isinstance(exc_info.value, ValidationError)
