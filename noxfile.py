import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# confluent-kafka and psycopg2 ship C extensions; a wheel cached for one
# interpreter can be served to another, so they are reinstalled per session.
_C_EXT_PACKAGES = ["psycopg2-binary", "confluent-kafka"]


def _install(session: nox.Session) -> None:
    """Install productsearch with its test group into the session virtualenv."""
    session.run("poetry", "install", "--with", "test", external=True)
    session.run("pip", "install", "--force-reinstall", "--no-cache-dir", *_C_EXT_PACKAGES)


def _pytest(session: nox.Session, *args: str) -> None:
    _install(session)
    session.run("pytest", *args, *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the full suite."""
    _pytest(session)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_core(session: nox.Session) -> None:
    """Pure logic and service tests against the in-memory adapters."""
    _pytest(session, "-m", "core or application")


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_integration(session: nox.Session) -> None:
    """Consumer, subscribers, HTTP and client-adapter tests."""
    _pytest(session, "-m", "integration")


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_bdd(session: nox.Session) -> None:
    """Event buffer and product indexing scenarios."""
    _pytest(session, "-m", "bdd")
