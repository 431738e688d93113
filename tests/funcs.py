from rowcraft import Integer, Nullable, Pg, Table, Text


users = Table('users', id=Integer, name=Text, email=Nullable(Text))
posts = Table('posts', id=Integer, user_id=Integer, title=Text)


def render(fragment, backend=None):
    """Render an expression or a tuple on its own. Return the built query."""
    out = (backend or Pg()).query_builder()
    fragment.walk_ast(out)
    return out.finish()


def render_with(method, fragment, backend=None):
    """Render a fragment with one of its other render methods, e.g. `walk_changeset`."""
    out = (backend or Pg()).query_builder()
    getattr(fragment, method)(out)
    return out.finish()


def assert_query(cmd, expected_query, expected_params):
    built = cmd.build_query() if hasattr(cmd, 'build_query') else cmd
    actual_query = built.as_string()
    assert actual_query == expected_query, '"{}" != "{}"'.format(actual_query, expected_query)
    assert built.params == expected_params, '"{}" != "{}"'.format(built.params, expected_params)


class Fragment:
    """Stand-in expression which renders a fixed text and records how often it was rendered."""

    def __init__(self, text, static=True, noop=False):
        self.text = text
        self.static = static
        self.noop = noop
        self.rendered = 0

    def walk_ast(self, out):
        self.rendered += 1
        out.push_sql(self.text)

    def walk_changeset(self, out):
        self.walk_ast(out)

    def is_noop(self):
        return self.noop

    def query_id(self):
        return (Fragment, self.text)

    def has_static_query_id(self):
        return self.static


class BrokenFragment(Fragment):
    """Stand-in expression whose rendering fails."""

    def walk_ast(self, out):
        raise OSError('output buffer is full')
