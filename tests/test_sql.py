import pytest
from covenantsql.sql import extract_table_name, is_select


@pytest.mark.parametrize('sql', [
    'SELECT * FROM users',
    'select 1',
    '  \n\tSelect id FROM users',
    'SHOW TABLES',
    'show create table users',
    'DESC users',
    'describe users',
])
def test_is_select_reads(sql):
    assert is_select(sql) is True


@pytest.mark.parametrize('sql', [
    'INSERT INTO users VALUES (1)',
    'UPDATE users SET email = ?',
    'DELETE FROM users',
    'CREATE TABLE users (id INTEGER)',
    'WITH t AS (SELECT 1) SELECT * FROM t',
    '-- SELECT',
    '',
    '   ',
])
def test_is_select_writes(sql):
    assert is_select(sql) is False


@pytest.mark.parametrize(('sql', 'expected'), [
    ('SELECT * FROM `users`', 'users'),
    ("SELECT * FROM 'users' WHERE id = 1", 'users'),
    ('SELECT * FROM users', 'users'),
    ('select * from users', 'users'),
    ('SELECT * From users LIMIT 3', 'users'),
    ('SELECT a.id FROM users a JOIN orders b ON a.id = b.user_id', 'users'),
    ('SELECT 1', ''),
    ('SELECT * FROM', ''),
    ('SHOW TABLES', ''),
])
def test_extract_table_name(sql, expected):
    assert extract_table_name(sql) == expected


def test_extract_table_name_not_select():
    assert extract_table_name('INSERT INTO x VALUES (1)') == ''
    assert extract_table_name('DELETE FROM users') == ''


def test_extract_table_name_keeps_empty_tokens():
    """Repeated whitespace is not merged, so the token after FROM is empty."""
    assert extract_table_name('SELECT * FROM  users') == ''
    assert extract_table_name('SELECT * FROM\tusers') == 'users'


def test_extract_table_name_subquery():
    """Only a label: a subquery yields whatever follows the first FROM."""
    assert extract_table_name('SELECT * FROM (SELECT id FROM users) t') == '(SELECT'
