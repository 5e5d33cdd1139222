import pytest
import sqlalchemy as sa

from keypage import exc
from keypage.engine import CursorPage, PageContext
from keypage.operations import SortingDirection, NullsPosition, get_sort_columns

from .util.models import User, Article
from .util.test_queries import assert_statement_lines


@pytest.mark.parametrize(('stmt', 'expected_sort'), [
    # No sorting: sort by id, implicitly
    (sa.select(Article), [('id', SortingDirection.ASC)]),
    # Sort ASC, sort DESC
    (sa.select(Article).order_by(Article.a), [('a', SortingDirection.ASC)]),
    (sa.select(Article).order_by(Article.a.asc()), [('a', SortingDirection.ASC)]),
    (sa.select(Article).order_by(Article.a.desc()), [('a', SortingDirection.DESC)]),
    # NULLS FIRST/LAST don't change the direction
    (sa.select(Article).order_by(Article.a.desc().nulls_last()), [('a', SortingDirection.DESC)]),
    (sa.select(Article).order_by(Article.a.asc().nulls_first()), [('a', SortingDirection.ASC)]),
    # Many fields: order is preserved
    (sa.select(Article).order_by(Article.rating.desc(), Article.a, Article.id.desc()), [
        ('rating', SortingDirection.DESC),
        ('a', SortingDirection.ASC),
        ('id', SortingDirection.DESC),
    ]),
    # Table columns
    (sa.select(Article.__table__).order_by(Article.__table__.c.b.desc()), [('b', SortingDirection.DESC)]),
    # Unqualified column: belongs to the primary table
    (sa.select(Article).order_by(sa.column('rating')), [('rating', SortingDirection.ASC)]),
    # Column names as strings
    (sa.select(Article).order_by('rating', sa.desc('id')), [('rating', SortingDirection.ASC), ('id', SortingDirection.DESC)]),
    (sa.select(Article).order_by(sa.desc('a.rating')), [('rating', SortingDirection.DESC)]),
])
def test_get_sort_columns(stmt: sa.sql.Select, expected_sort: list[tuple]):
    sort_columns = get_sort_columns(stmt, Article.__table__, 'id')
    assert [(c.name, c.direction) for c in sort_columns] == expected_sort


@pytest.mark.parametrize(('stmt', 'expected_nulls'), [
    (sa.select(Article).order_by(Article.a.desc()), [None]),
    (sa.select(Article).order_by(Article.a.desc().nulls_last()), [NullsPosition.LAST]),
    (sa.select(Article).order_by(Article.a.nulls_first(), Article.id), [NullsPosition.FIRST, None]),
    (sa.select(Article).order_by(sa.nulls_last(sa.desc('a'))), [NullsPosition.LAST]),
])
def test_get_sort_columns_nulls(stmt: sa.sql.Select, expected_nulls: list):
    sort_columns = get_sort_columns(stmt, Article.__table__, 'id')
    assert [c.nulls for c in sort_columns] == expected_nulls


@pytest.mark.parametrize('stmt', [
    # Sorting by a joined table
    sa.select(Article).join(Article.author).order_by(User.a),
    sa.select(Article).join(Article.author).order_by(Article.id, User.a.desc()),
    sa.select(Article).order_by(sa.table('u', sa.column('a')).c.a),
    # Sorting by an expression
    sa.select(Article).order_by(sa.func.lower(Article.a)),
    # Column names: another table, no such column
    sa.select(Article).order_by('u.a'),
    sa.select(Article).order_by(sa.desc('missing')),
])
def test_get_sort_columns_unsupported(stmt: sa.sql.Select):
    with pytest.raises(exc.UnsupportedSortTarget):
        get_sort_columns(stmt, Article.__table__, 'id')


@pytest.mark.parametrize(('stmt', 'input', 'expected_query_lines'), [
    # Default sorting
    (sa.select(Article), dict(), ['FROM a', 'ORDER BY a.id ASC']),
    # Keep sorting
    (sa.select(Article).order_by(Article.rating, Article.id.desc()), dict(), ['ORDER BY a.rating ASC, a.id DESC']),
    # Going forward: same sorting
    (sa.select(Article).order_by(Article.rating, Article.id.desc()), dict(after=[1, 2]), ['ORDER BY a.rating ASC, a.id DESC']),
    # Going backward: reversed sorting
    (sa.select(Article), dict(before=[5]), ['ORDER BY a.id DESC']),
    (sa.select(Article).order_by(Article.rating, Article.id.desc()), dict(before=[1, 2]), ['ORDER BY a.rating DESC, a.id ASC']),
    # Column names as strings
    (sa.select(Article).order_by('rating', sa.desc('id')), dict(), ['ORDER BY a.rating ASC, a.id DESC']),
    # NULLS FIRST/LAST are kept; swapped when going backward
    (sa.select(Article).order_by(Article.a.desc().nulls_last()), dict(), ['ORDER BY a.a DESC NULLS LAST']),
    (sa.select(Article).order_by(Article.a.desc().nulls_last()), dict(after=['a-3-a']), ['ORDER BY a.a DESC NULLS LAST']),
    (sa.select(Article).order_by(Article.a.desc().nulls_last(), Article.id), dict(before=['a-3-a', 3]), ['ORDER BY a.a ASC NULLS FIRST, a.id DESC']),
])
def test_sort_sql(stmt: sa.sql.Select, input: dict, expected_query_lines: list[str]):
    """ Typical test: what SQL is generated """
    page = CursorPage(PageContext.for_model(Article, stmt), **input)
    assert_statement_lines(page.statement(), *expected_query_lines)
