import covenantsql
from covenantsql import dbapi
from covenantsql.config import ConnectionConfig


def test_public_names():
    for name in covenantsql.__all__:
        assert hasattr(covenantsql, name), name
    assert covenantsql.__version__


def test_exceptions_share_dbapi_hierarchy():
    assert issubclass(covenantsql.ValidationError, dbapi.ProgrammingError)
    assert issubclass(covenantsql.DataError, dbapi.DatabaseError)
    assert issubclass(covenantsql.RemoteError, dbapi.Error)


def test_config_keeps_ssl_flag_and_context():
    config = ConnectionConfig(database='db', ssl=True)
    assert config.ssl is True
    assert config.scheme == 'https'
    assert config.ssl_verify() is True
