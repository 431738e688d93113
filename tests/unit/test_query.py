import pytest

from rowcraft import Mysql, Pg, Query, Select, Sqlite, make_tuple, nullable, tuple_class
from rowcraft.base import BaseCommand
from rowcraft.behaviours import FromBehaviour, WhereBehaviour
from rowcraft.errors import DataError, ProgrammingError
from rowcraft.funcs import count, now
from tests.funcs import assert_query, posts, users


def test_inheritance():
    assert issubclass(Query, BaseCommand)
    assert issubclass(Query, WhereBehaviour)
    assert issubclass(Query, FromBehaviour)


def test_query_is_select():
    assert Query is Select


def test_select():
    q = Query(Pg(), users.all_columns).from_(users)
    assert_query(q, 'SELECT "users"."id", "users"."name", "users"."email" FROM "users"', {})
    q.select(users.name)
    assert_query(q, 'SELECT "users"."name" FROM "users"', {})
    q.add_select(users.email)
    assert_query(q, 'SELECT "users"."name", "users"."email" FROM "users"', {})
    q.add_select(users.id)
    assert_query(q, 'SELECT "users"."name", "users"."email", "users"."id" FROM "users"', {})
    q.distinct()
    assert_query(q, 'SELECT DISTINCT "users"."name", "users"."email", "users"."id" FROM "users"', {})
    q.distinct(False)
    assert_query(q, 'SELECT "users"."name", "users"."email", "users"."id" FROM "users"', {})


def test_add_select_to_empty():
    q = Query(Pg()).add_select(users.id).from_(users)
    assert_query(q, 'SELECT "users"."id" FROM "users"', {})


def test_select_without_selection():
    with pytest.raises(ProgrammingError) as ei:
        Query(Pg()).from_(users).build_query()
    assert ei.value.args[0] == 'Please specify what to select'


def test_where():
    q = Query(Pg(), make_tuple(users.id, users.name)).from_(users).where(users.id.eq(7))
    assert_query(
        q, 'SELECT "users"."id", "users"."name" FROM "users" WHERE "users"."id" = %(p0)s',
        {'p0': 7})
    assert q.as_string() == 'SELECT "users"."id", "users"."name" FROM "users" ' \
                            'WHERE "users"."id" = %(p0)s'
    assert q.get_params() == {'p0': 7}

    q = Query(Mysql(), users.id).from_(users).where(users.id.eq(7))
    assert_query(q, 'SELECT `users`.`id` FROM `users` WHERE `users`.`id` = %s', [7])
    q = Query(Sqlite(), users.id).from_(users).where(users.id.eq(7))
    assert_query(q, 'SELECT "users"."id" FROM "users" WHERE "users"."id" = ?', [7])


def test_subquery():
    sq = Query(Pg(), posts.user_id).from_(posts).where(posts.title.eq('Hello'))
    q = Query(Pg(), users.name).from_(users).where(users.id.eq(sq))
    assert_query(
        q,
        'SELECT "users"."name" FROM "users" WHERE "users"."id" = '
        '(SELECT "posts"."user_id" FROM "posts" WHERE "posts"."title" = %(p0)s)',
        {'p0': 'Hello'})


def test_joins():
    q = Query(Pg(), make_tuple(users.name, posts.title)) \
        .from_(users) \
        .join(posts, posts.user_id.eq(users.id))
    assert_query(
        q,
        'SELECT "users"."name", "posts"."title" FROM "users" '
        'INNER JOIN "posts" ON "posts"."user_id" = "users"."id"',
        {})
    assert q.sources() == (users, posts)


def test_left_join():
    q = Query(Pg(), make_tuple(users.name, nullable(posts.all_columns))) \
        .from_(users) \
        .left_join(posts, posts.user_id.eq(users.id))
    assert_query(
        q,
        'SELECT "users"."name", "posts"."id", "posts"."user_id", "posts"."title" FROM "users" '
        'LEFT OUTER JOIN "posts" ON "posts"."user_id" = "users"."id"',
        {})
    assert q.sql_type.fields_needed() == 4

    rows = [('Jane', None, None, None), ('John', 1, 2, 'Hello')]
    loaded = list(q.load(rows))
    assert loaded == [('Jane', None), ('John', (1, 2, 'Hello'))]
    assert type(loaded[1][1]) is tuple_class(3)

    with pytest.raises(DataError):
        q.load_one(('John', 1, None, None))


def test_selection_must_appear_on_sources():
    q = Query(Pg(), make_tuple(users.id, posts.title)).from_(users)
    with pytest.raises(TypeError):
        q.build_query()
    q.join(posts, posts.user_id.eq(users.id))
    assert_query(
        q,
        'SELECT "users"."id", "posts"."title" FROM "users" '
        'INNER JOIN "posts" ON "posts"."user_id" = "users"."id"',
        {})


def test_aggregates():
    q = Query(Pg(), make_tuple(count(users.id), count(users.email))).from_(users)
    assert_query(q, 'SELECT COUNT("users"."id"), COUNT("users"."email") FROM "users"', {})
    assert q.load_one((3, 2)) == (3, 2)
    q = Query(Pg(), make_tuple(users.name, count(users.id))).from_(users)
    with pytest.raises(TypeError):
        q.build_query()


def test_query_id():
    first = Query(Pg(), users.all_columns).from_(users).where(users.id.eq(1))
    second = Query(Pg(), users.all_columns).from_(users).where(users.id.eq(2))
    assert first.query_id() == second.query_id()
    assert first.has_static_query_id()
    assert first.query_id() != Query(Pg(), users.all_columns).from_(users).query_id()
    assert first.query_id() != second.distinct().query_id()

    q = Query(Pg(), make_tuple(users.id, now())).from_(users)
    assert not q.has_static_query_id()


def test_nested_aggregates():
    q = Query(Pg(), make_tuple(make_tuple(users.id, count(users.id)))).from_(users)
    with pytest.raises(TypeError):
        q.build_query()
    q = Query(Pg(), make_tuple(count(users.id), nullable(make_tuple(users.name)))).from_(users)
    with pytest.raises(TypeError):
        q.build_query()
    q = Query(Pg(), make_tuple(count(users.id), make_tuple(count(users.email)))).from_(users)
    assert_query(q, 'SELECT COUNT("users"."id"), COUNT("users"."email") FROM "users"', {})
